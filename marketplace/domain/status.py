# marketplace/domain/status.py
from enum import Enum

from marketplace.domain.errors import InvalidStateError


class ProductStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


# Moderacja: decyzja tylko z Pending. Powrot Approved -> Pending nastepuje
# wylacznie przez edycje wlasciciela (resubmit), nie przez moderatora.
_PRODUCT_TRANSITIONS = {
    ProductStatus.PENDING: {ProductStatus.APPROVED, ProductStatus.REJECTED},
    ProductStatus.APPROVED: {ProductStatus.PENDING},
    ProductStatus.REJECTED: set(),
}

_MODERATION_TARGETS = {ProductStatus.APPROVED, ProductStatus.REJECTED}

# Zamowienie: ze stanow nieterminalnych wolno przejsc do dowolnego (takze wstecz),
# Delivered i Cancelled sa terminalne.
_ALL_ORDER_STATUSES = {
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
}

_ORDER_TRANSITIONS = {
    OrderStatus.PENDING: _ALL_ORDER_STATUSES,
    OrderStatus.PROCESSING: _ALL_ORDER_STATUSES,
    OrderStatus.SHIPPED: _ALL_ORDER_STATUSES,
    OrderStatus.DELIVERED: {OrderStatus.DELIVERED},
    OrderStatus.CANCELLED: {OrderStatus.CANCELLED},
}

TERMINAL_ORDER_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


def allowed_transitions(current: ProductStatus | OrderStatus) -> frozenset:
    """Zbior statusow osiagalnych z `current`.

    Dla zamowien zbior zawiera sam status (self-transition jest no-opem
    dla stanow terminalnych i aktualizacja timestampu dla pozostalych).
    """
    if isinstance(current, ProductStatus):
        return frozenset(_PRODUCT_TRANSITIONS[current])
    if isinstance(current, OrderStatus):
        return frozenset(_ORDER_TRANSITIONS[current])
    raise TypeError(f"Unsupported status type: {type(current).__name__}")


def can_moderate(current: ProductStatus, target: ProductStatus) -> bool:
    return target in _MODERATION_TARGETS and target in allowed_transitions(current)


def parse_order_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        valid = ", ".join(s.value for s in OrderStatus)
        raise InvalidStateError(f"Invalid order status. Valid statuses: {valid}") from None
