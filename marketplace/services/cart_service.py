# marketplace/services/cart_service.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketplace.data.models.cart_item import CartItemModel
from marketplace.data.models.product import ProductModel
from marketplace.domain.errors import (
    CapacityExceededError,
    ConcurrencyConflict,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
)
from marketplace.domain.status import ProductStatus
from marketplace.repos.cart_repo import CartRepo
from marketplace.repos.product_repo import ProductRepo
from marketplace.utils.logging import get_logger
from marketplace.utils.retry import conflict_retry

logger = get_logger(__name__)


def _require_positive(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidStateError("Quantity must be a positive integer.")


class CartService:
    """
    Use case'y koszyka (CQRS light):
    commands (add, update, remove, clear) modyfikuja tylko cart_items,
    query (list, total, get) tylko odczyt.
    Produkt jest tylko czytany - stan magazynu zmienia wylacznie OrderService.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def list_items(self, user_id: int) -> List[Dict[str, Any]]:
        return [self._to_dict(i) for i in self.repo.get_cart_items(user_id)]

    def total(self, user_id: int) -> Decimal:
        items = self.repo.get_cart_items(user_id)
        return sum((self._line_price(i) * i.quantity for i in items), Decimal("0.00"))

    def get_cart(self, user_id: int) -> Dict[str, Any]:
        items = self.list_items(user_id)
        return {
            "user_id": user_id,
            "items": items,
            "total": sum((i["subtotal"] for i in items), Decimal("0.00")),
            "item_count": sum(i["quantity"] for i in items),
        }

    # =====================================================
    # COMMANDS
    # =====================================================
    @conflict_retry()
    def add_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        """
        Dodanie produktu do koszyka.

        Walidacja:
        - quantity > 0
        - produkt istnieje (NotFound), jest Approved i aktywny (InvalidState)
        - ilosc (po zsumowaniu z istniejaca pozycja) <= stan magazynu
        """
        _require_positive(quantity)

        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found.")

        if product.status != ProductStatus.APPROVED.value:
            raise InvalidStateError("Product is not available for purchase.")

        if not product.is_active:
            raise InvalidStateError("Product is not active.")

        if product.stock_quantity < quantity:
            raise CapacityExceededError(f"Insufficient stock. Available: {product.stock_quantity}")

        try:
            existing_item = self.repo.get_cart_item_by_product(user_id, product_id)

            if existing_item:
                new_quantity = existing_item.quantity + quantity
                if product.stock_quantity < new_quantity:
                    raise CapacityExceededError(
                        f"Insufficient stock. Available: {product.stock_quantity}, Requested: {new_quantity}"
                    )

                logger.info(
                    f"Product {product_id} already in cart of user {user_id}, "
                    f"quantity {existing_item.quantity} -> {new_quantity}"
                )
                if self.repo.merge_quantity(existing_item.id, existing_item.quantity, new_quantity) == 0:
                    raise ConcurrencyConflict(f"Cart item {existing_item.id} was modified by another operation")
                item = existing_item
            else:
                item = self.repo.add_cart_item(
                    CartItemModel(
                        user_id=user_id,
                        product_id=product_id,
                        quantity=quantity,
                    )
                )

            self.repo.commit()

        except IntegrityError:
            #rownolegle pierwsze dodanie tej samej pary (user, product) - ponow jako merge
            self.repo.rollback()
            raise ConcurrencyConflict("Cart line created concurrently") from None
        except ConcurrencyConflict:
            self.repo.rollback()
            logger.warning(f"Concurrent change of cart line (user {user_id}, product {product_id}), retrying")
            raise
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Product added to cart: user_id={user_id}, product_id={product_id}, quantity={item.quantity}")
        return self._to_dict(item)

    def update_item(self, item_id: int, user_id: int, quantity: int) -> Dict[str, Any]:
        _require_positive(quantity)

        item = self.repo.get_cart_item(item_id)
        if not item:
            raise NotFoundError("Cart item not found.")

        if item.user_id != user_id:
            raise ForbiddenError("You can only update your own cart items.")

        product = self.products.get_product(item.product_id)
        available = product.stock_quantity if product else 0
        if product is None or available < quantity:
            raise CapacityExceededError(f"Insufficient stock. Available: {available}")

        try:
            item.quantity = quantity
            item.updated_at = datetime.now(timezone.utc)
            self.repo.add_cart_item(item)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Cart item updated: item_id={item_id}, user_id={user_id}, quantity={quantity}")
        return self._to_dict(item)

    def remove_item(self, item_id: int, user_id: int) -> bool:
        item = self.repo.get_cart_item(item_id)
        if not item:
            return False

        if item.user_id != user_id:
            raise ForbiddenError("You can only remove your own cart items.")

        try:
            self.repo.delete_cart_item(item)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Item removed from cart: item_id={item_id}, user_id={user_id}")
        return True

    def clear(self, user_id: int) -> int:
        try:
            removed = self.repo.clear_user_cart(user_id)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Cart cleared: user_id={user_id}, removed={removed}")
        return removed

    # =====================================================
    # HELPERS
    # =====================================================
    @staticmethod
    def _line_price(item: CartItemModel) -> Decimal:
        product: ProductModel | None = item.product
        return Decimal(product.price) if product is not None else Decimal("0.00")

    def _to_dict(self, item: CartItemModel) -> Dict[str, Any]:
        price = self._line_price(item)
        product = item.product
        return {
            "id": item.id,
            "product_id": item.product_id,
            "product_name": product.name if product else "",
            "product_price": price,
            "product_image_url": product.image_url if product else None,
            "quantity": item.quantity,
            "subtotal": price * item.quantity,
            "created_at": item.created_at,
        }
