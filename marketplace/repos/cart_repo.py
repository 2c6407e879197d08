# marketplace/repos/cart_repo.py
from datetime import datetime, timezone
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session, joinedload

from marketplace.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_item(self, item_id: int) -> CartItemModel | None:
        return self.db.get(CartItemModel, item_id)

    def get_cart_item_by_product(self, user_id: int, product_id: int) -> CartItemModel | None:
        stmt = select(CartItemModel).where(
            CartItemModel.user_id == user_id,
            CartItemModel.product_id == product_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_cart_items(self, user_id: int) -> List[CartItemModel]:
        #najnowsze na gorze, produkt dociagniety od razu (cena live)
        stmt = (
            select(CartItemModel)
            .options(joinedload(CartItemModel.product))
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.created_at.desc(), CartItemModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def merge_quantity(self, item_id: int, old_quantity: int, new_quantity: int) -> int:
        #zapis warunkowy: 0 wierszy = ktos zmienil ilosc miedzy odczytem a zapisem
        stmt = (
            update(CartItemModel)
            .where(CartItemModel.id == item_id, CartItemModel.quantity == old_quantity)
            .values(quantity=new_quantity, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def clear_user_cart(self, user_id: int) -> int:
        stmt = (
            delete(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
