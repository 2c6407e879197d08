# marketplace/services/order_service.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from marketplace.data.models.order import OrderModel
from marketplace.data.models.order_item import OrderItemModel
from marketplace.domain.access import Actor, is_elevated, require_elevated
from marketplace.domain.errors import ConcurrencyConflict, ForbiddenError, InvalidStateError, NotFoundError
from marketplace.domain.schemas import ShippingInfo
from marketplace.domain.status import (
    TERMINAL_ORDER_STATUSES,
    OrderStatus,
    ProductStatus,
    allowed_transitions,
    parse_order_status,
)
from marketplace.repos.cart_repo import CartRepo
from marketplace.repos.order_repo import OrderRepo
from marketplace.repos.product_repo import ProductRepo
from marketplace.utils.logging import get_logger
from marketplace.utils.retry import conflict_retry

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.

    Jedyne miejsce, ktore zmienia stan magazynowy produktow:
    - create_from_cart: dekrementacja (warunkowa) + czyszczenie koszyka
    - update_status -> Cancelled (pierwszy raz): zwrot na stan
    Kazda z tych operacji to jedna transakcja - albo wszystko, albo nic.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def get_order(self, order_id: int, user_id: int, role: str | None) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found.")

        #uzytkownik widzi tylko swoje zamowienia, admin wszystkie
        if not is_elevated(role) and order.user_id != user_id:
            raise ForbiddenError("You can only view your own orders.")

        return self._to_dict(order)

    def list_all(self, actor: Actor) -> List[Dict[str, Any]]:
        require_elevated(actor, "Only administrators can view all orders.")
        return [self._to_dict(o) for o in self.repo.list_orders()]

    def list_for_user(self, user_id: int) -> List[Dict[str, Any]]:
        return [self._to_dict(o) for o in self.repo.list_orders_by_user(user_id)]

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_from_cart(self, user_id: int, shipping: ShippingInfo | None = None) -> Dict[str, Any]:
        """
        Use Case: Tworzenie zamówienia z koszyka.

        1. Pobiera koszyk (pusty -> InvalidState)
        2. Blokuje wiersze produktow i waliduje kazda pozycje
           (aktywny, Approved, ilosc <= stan)
        3. Buduje snapshot pozycji (nazwa + cena) i liczy total
        4. Warunkowo dekrementuje stan kazdego produktu
        5. Zapisuje zamowienie (Pending) i czysci koszyk
        Wszystko w jednej transakcji; dowolny blad = rollback calosci.
        """
        shipping = shipping or ShippingInfo()

        try:
            cart_items = self.carts.get_cart_items(user_id)
            if not cart_items:
                raise InvalidStateError("Your cart is empty. Cannot create order.")

            #blokady w stalym porzadku (po id produktu)
            locked = self.products.lock_products(i.product_id for i in cart_items)

            total_amount = Decimal("0.00")
            order_items = []

            for cart_item in cart_items:
                product = locked.get(cart_item.product_id)

                if product is None or not product.is_active:
                    name = product.name if product else f"#{cart_item.product_id}"
                    raise InvalidStateError(f"Product '{name}' is no longer available.")

                if product.status != ProductStatus.APPROVED.value:
                    raise InvalidStateError(f"Product '{product.name}' is not approved for purchase.")

                if product.stock_quantity < cart_item.quantity:
                    raise InvalidStateError(
                        f"Insufficient stock for '{product.name}'. "
                        f"Available: {product.stock_quantity}, Requested: {cart_item.quantity}"
                    )

                #snapshot - od tej chwili zamowienie nie czyta ceny z katalogu
                price = Decimal(product.price)
                subtotal = price * cart_item.quantity
                total_amount += subtotal

                order_items.append(
                    OrderItemModel(
                        product_id=product.id,
                        product_name=product.name,
                        price=price,
                        quantity=cart_item.quantity,
                        subtotal=subtotal,
                    )
                )

            # Dekrementacja warunkowa: WHERE stock >= qty
            # chroni przed overselling takze bez blokad (np. sqlite)
            for item in order_items:
                if not self.products.decrement_stock(item.product_id, item.quantity):
                    raise InvalidStateError(
                        f"Insufficient stock for '{item.product_name}'. Requested: {item.quantity}"
                    )

            now = datetime.now(timezone.utc)
            order = OrderModel(
                user_id=user_id,
                status=OrderStatus.PENDING.value,
                total_amount=total_amount,
                shipping_address=shipping.shipping_address,
                shipping_city=shipping.shipping_city,
                shipping_state=shipping.shipping_state,
                shipping_zip_code=shipping.shipping_zip_code,
                shipping_country=shipping.shipping_country,
                notes=shipping.notes,
                version=1,
                created_at=now,
                items=order_items,
            )
            self.repo.create_order(order)

            self.carts.clear_user_cart(user_id)

            self.repo.commit()

        except InvalidStateError as e:
            self.repo.rollback()
            logger.info(f"Order creation aborted for user {user_id}: {e}")
            raise
        except Exception:
            self.repo.rollback()
            logger.exception(f"Order creation failed for user {user_id}, transaction rolled back")
            raise

        logger.info(
            f"Order created: order_id={order.id}, user_id={user_id}, "
            f"total_amount={total_amount}, lines={len(order_items)}"
        )

        return self._to_dict(self.repo.get_order(order.id))

    @conflict_retry()
    def update_status(self, order_id: int, new_status: str | OrderStatus, actor: Actor) -> Dict[str, Any]:
        """
        Zmiana statusu przez admina.

        - Cancelled/Delivered sa terminalne (zmiana na inny status -> InvalidState)
        - pierwsze przejscie do Cancelled zwraca ilosci na stan produktow
          (brakujacy produkt jest pomijany)
        - zapis statusu warunkowy na version: przegrany wyscig -> rollback
          i ponowienie calej operacji, wiec zwrot na stan nie zdarzy sie dwa razy
        """
        require_elevated(actor, "Only administrators can change order status.")

        target = parse_order_status(new_status.value if isinstance(new_status, OrderStatus) else new_status)

        try:
            order = self.repo.get_order(order_id)
            if not order:
                raise NotFoundError("Order not found.")

            current = OrderStatus(order.status)
            if target not in allowed_transitions(current):
                raise InvalidStateError(f"Cannot change status of a {current.value.lower()} order.")

            #Cancelled -> Cancelled / Delivered -> Delivered: no-op, bez zapisu
            if target == current and current in TERMINAL_ORDER_STATUSES:
                self.repo.rollback()
                logger.info(f"Order {order_id} already {current.value}, nothing to do")
                return self._to_dict(order)

            is_cancelling_now = target == OrderStatus.CANCELLED and current != OrderStatus.CANCELLED

            rowcount = self.repo.update_order_version(
                order_id=order.id,
                old_version=order.version,
                new_data={
                    "status": target.value,
                    "version": order.version + 1,
                    "updated_at": datetime.now(timezone.utc),
                },
            )

            if rowcount == 0:
                raise ConcurrencyConflict(f"Order {order_id} was modified by another operation")

            if is_cancelling_now:
                self._restock(order)

            self.repo.commit()

        except ConcurrencyConflict:
            self.repo.rollback()
            logger.warning(f"Concurrent status change on order {order_id}, retrying")
            raise
        except (NotFoundError, InvalidStateError):
            self.repo.rollback()
            raise
        except Exception:
            self.repo.rollback()
            logger.exception(f"Status update failed for order {order_id}, transaction rolled back")
            raise

        logger.info(
            f"Order status updated: order_id={order_id}, "
            f"{current.value} -> {target.value}, admin_user_id={actor.user_id}"
        )

        return self._to_dict(self.repo.get_order(order_id))

    # =====================================================
    # HELPERS
    # =====================================================
    def _restock(self, order: OrderModel) -> None:
        for item in order.items:
            if not self.products.increment_stock(item.product_id, item.quantity):
                # TODO: zapisywac utracony zwrot do tabeli audytowej zamiast tylko logowac
                logger.warning(
                    f"Restock skipped: product {item.product_id} no longer exists "
                    f"(order {order.id}, quantity {item.quantity})"
                )

    @staticmethod
    def _to_dict(order: OrderModel) -> Dict[str, Any]:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status,
            "total_amount": order.total_amount,
            "shipping_address": order.shipping_address,
            "shipping_city": order.shipping_city,
            "shipping_state": order.shipping_state,
            "shipping_zip_code": order.shipping_zip_code,
            "shipping_country": order.shipping_country,
            "notes": order.notes,
            "created_at": order.created_at,
            "updated_at": order.updated_at,
            "items": [
                {
                    "id": i.id,
                    "product_id": i.product_id,
                    "product_name": i.product_name,
                    "price": i.price,
                    "quantity": i.quantity,
                    "subtotal": i.subtotal,
                }
                for i in order.items
            ],
        }
