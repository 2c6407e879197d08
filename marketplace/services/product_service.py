# marketplace/services/product_service.py
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from marketplace.data.models.product import ProductModel
from marketplace.domain.access import Actor, Role, is_elevated, require_elevated, require_owner_or_elevated
from marketplace.domain.errors import ForbiddenError, InvalidStateError, NotFoundError
from marketplace.domain.schemas import ProductIn
from marketplace.domain.status import ProductStatus, allowed_transitions, can_moderate
from marketplace.repos.category_repo import CategoryRepo
from marketplace.repos.product_repo import ProductRepo
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    """
    Katalog + moderacja produktow.

    Maszyna stanow (status):
      create          -> Approved (admin) | Pending (seller)
      Pending         -> Approved | Rejected   (tylko admin, moderate)
      Approved        -> Pending               (edycja przez wlasciciela-sprzedawce)
    Usuniecie jest miekkie (is_active=False) i nie zmienia statusu.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepo(db)
        self.categories = CategoryRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def get_product(self, product_id: int, actor: Actor | None = None) -> Dict[str, Any]:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found.")

        #klient / anonim widzi tylko zatwierdzone
        if (actor is None or actor.role == Role.CUSTOMER) and product.status != ProductStatus.APPROVED.value:
            raise NotFoundError("Product not found.")

        return self._to_dict(product)

    def list_products(self, actor: Actor | None = None) -> List[Dict[str, Any]]:
        if actor is None or actor.role == Role.CUSTOMER:
            return self.list_approved()
        return [self._to_dict(p) for p in self.repo.list_all()]

    def list_approved(self) -> List[Dict[str, Any]]:
        return [self._to_dict(p) for p in self.repo.list_approved()]

    def list_pending(self, actor: Actor) -> List[Dict[str, Any]]:
        require_elevated(actor, "Only administrators can view pending products.")
        return [self._to_dict(p) for p in self.repo.list_pending()]

    def list_by_seller(self, seller_id: int, actor: Actor) -> List[Dict[str, Any]]:
        if actor.role == Role.CUSTOMER:
            raise ForbiddenError("Only sellers and administrators can browse seller catalogues.")
        if not is_elevated(actor.role) and actor.user_id != seller_id:
            raise ForbiddenError("You can only view your own products.")
        return [self._to_dict(p) for p in self.repo.list_by_seller(seller_id)]

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_product(self, payload: ProductIn, actor: Actor) -> Dict[str, Any]:
        if actor.role == Role.CUSTOMER:
            raise ForbiddenError("Only sellers and administrators can create products.")

        self._require_active_category(payload.category_id)

        #admin - od razu zatwierdzony, seller - czeka na moderacje
        now = datetime.now(timezone.utc)
        elevated = is_elevated(actor.role)

        product = ProductModel(
            name=payload.name,
            description=payload.description,
            price=payload.price,
            stock_quantity=payload.stock_quantity,
            image_url=payload.image_url,
            category_id=payload.category_id,
            created_by_user_id=actor.user_id,
            status=(ProductStatus.APPROVED if elevated else ProductStatus.PENDING).value,
            is_active=True,
            created_at=now,
            approved_by_user_id=actor.user_id if elevated else None,
            approved_at=now if elevated else None,
        )

        try:
            self.repo.create_product(product)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Product created: {product.id}, {product.name}, "
            f"status: {product.status}, created by: {actor.user_id}"
        )
        return self._to_dict(product)

    def update_product(self, product_id: int, payload: ProductIn, actor: Actor) -> Dict[str, Any]:
        if actor.role == Role.CUSTOMER:
            raise ForbiddenError("Only sellers and administrators can update products.")

        try:
            #blokada wiersza - edycja stanu nie moze przeplatac sie z checkoutem
            product = self.repo.get_product_for_update(product_id)
            if not product:
                raise NotFoundError("Product not found.")

            require_owner_or_elevated(actor, product, "You can only update your own products.")
            self._require_active_category(payload.category_id)

            # sprzedawca edytuje zatwierdzony produkt -> ponowna moderacja
            current = ProductStatus(product.status)
            if (
                not is_elevated(actor.role)
                and current == ProductStatus.APPROVED
                and ProductStatus.PENDING in allowed_transitions(current)
            ):
                logger.info(f"Product {product_id} edited by seller {actor.user_id}, resubmitted for review")
                product.status = ProductStatus.PENDING.value
                product.approved_by_user_id = None
                product.approved_at = None

            product.name = payload.name
            product.description = payload.description
            product.price = payload.price
            product.stock_quantity = payload.stock_quantity
            product.image_url = payload.image_url
            product.category_id = payload.category_id

            self.repo.update_product(product)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Product updated: {product.id}, {product.name}, updated by: {actor.user_id}")
        return self._to_dict(product)

    def delete_product(self, product_id: int, actor: Actor) -> Dict[str, Any]:
        if actor.role == Role.CUSTOMER:
            raise ForbiddenError("Only sellers and administrators can delete products.")

        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found.")

        require_owner_or_elevated(actor, product, "You can only delete your own products.")

        try:
            self.repo.soft_delete(product)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Product deleted (soft): {product_id}, deleted by: {actor.user_id}")
        return self._to_dict(product)

    def moderate(self, product_id: int, approved: bool, actor: Actor) -> Dict[str, Any]:
        require_elevated(actor, "Only administrators can approve or reject products.")

        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found.")

        target = ProductStatus.APPROVED if approved else ProductStatus.REJECTED
        if not can_moderate(ProductStatus(product.status), target):
            raise InvalidStateError("Only pending products can be approved or rejected.")

        try:
            product.status = target.value
            product.approved_by_user_id = actor.user_id
            product.approved_at = datetime.now(timezone.utc)
            self.repo.update_product(product)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Product {'approved' if approved else 'rejected'}: {product_id}, admin: {actor.user_id}")
        return self._to_dict(product)

    # =====================================================
    # HELPERS
    # =====================================================
    def _require_active_category(self, category_id: int) -> None:
        if self.categories.get_active_category(category_id) is None:
            raise InvalidStateError("Invalid or inactive product category.")

    @staticmethod
    def _to_dict(product: ProductModel) -> Dict[str, Any]:
        return {
            "id": product.id,
            "name": product.name,
            "description": product.description,
            "price": product.price,
            "stock_quantity": product.stock_quantity,
            "image_url": product.image_url,
            "category_id": product.category_id,
            "category_name": product.category.name if product.category else "",
            "created_by_user_id": product.created_by_user_id,
            "status": product.status,
            "is_active": product.is_active,
            "created_at": product.created_at,
            "updated_at": product.updated_at,
            "approved_at": product.approved_at,
            "approved_by_user_id": product.approved_by_user_id,
        }
