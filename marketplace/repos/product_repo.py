# marketplace/repos/product_repo.py
from datetime import datetime, timezone
from typing import Iterable, List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from marketplace.data.models.product import ProductModel
from marketplace.domain.status import ProductStatus


class ProductRepo:
    """
    Dostep do katalogu. Repo nigdy nie commituje - jednostka pracy
    nalezy do serwisu (commit/rollback).
    """

    def __init__(self, db: Session):
        self.db = db

    #odczyt
    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_product_for_update(self, product_id: int) -> ProductModel | None:
        #SELECT ... FOR UPDATE, swieze wartosci zamiast identity map
        stmt = (
            select(ProductModel)
            .where(ProductModel.id == product_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def lock_products(self, product_ids: Iterable[int]) -> dict[int, ProductModel]:
        ids = sorted(set(product_ids))
        if not ids:
            return {}
        #staly porzadek blokad (po id) zeby dwa zamowienia sie nie zakleszczyly
        stmt = (
            select(ProductModel)
            .where(ProductModel.id.in_(ids))
            .order_by(ProductModel.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return {p.id: p for p in self.db.execute(stmt).scalars().all()}

    def list_products(self, *criteria) -> List[ProductModel]:
        stmt = select(ProductModel).where(*criteria).order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def list_all(self) -> List[ProductModel]:
        return self.list_products()

    def list_approved(self) -> List[ProductModel]:
        return self.list_products(
            ProductModel.status == ProductStatus.APPROVED.value,
            ProductModel.is_active.is_(True),
        )

    def list_pending(self) -> List[ProductModel]:
        return self.list_products(ProductModel.status == ProductStatus.PENDING.value)

    def list_by_seller(self, seller_id: int) -> List[ProductModel]:
        return self.list_products(ProductModel.created_by_user_id == seller_id)

    #zapis
    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def update_product(self, product: ProductModel) -> ProductModel:
        product.updated_at = datetime.now(timezone.utc)
        self.db.add(product)
        self.db.flush()
        return product

    def soft_delete(self, product: ProductModel) -> ProductModel:
        product.is_active = False
        return self.update_product(product)

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """
        Warunkowy update: UPDATE products SET stock = stock - q
        WHERE id = :id AND stock >= q. False = ktos nas wyprzedzil.
        """
        stmt = (
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock_quantity >= quantity)
            .values(
                stock_quantity=ProductModel.stock_quantity - quantity,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount == 1

    def increment_stock(self, product_id: int, quantity: int) -> bool:
        stmt = (
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(
                stock_quantity=ProductModel.stock_quantity + quantity,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount == 1
