# marketplace/repos/order_repo.py
from typing import Any, Dict, List

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from marketplace.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        #zamowienie + pozycje w jednym flushu (cascade)
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_orders(self) -> List[OrderModel]:
        stmt = select(OrderModel).options(selectinload(OrderModel.items)).order_by(
            OrderModel.created_at.desc(), OrderModel.id.desc()
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_orders_by_user(self, user_id: int) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def update_order_version(self, order_id: int, old_version: int, new_data: Dict[str, Any]) -> int:
        # Optimistic locking warunek na wersje
        # UPDATE orders SET status=..., version=v+1 WHERE id=:id AND version=:v
        stmt = (
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
