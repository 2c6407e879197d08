from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, Numeric, String
from sqlalchemy.orm import relationship

from marketplace.data.database import Base
from marketplace.domain.status import OrderStatus


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)

    status = Column(String(50), nullable=False, default=OrderStatus.PENDING.value)  # Pending, Processing, Shipped, Delivered, Cancelled
    total_amount = Column(Numeric(18, 2), nullable=False)

    shipping_address = Column(String(200), nullable=True)
    shipping_city = Column(String(100), nullable=True)
    shipping_state = Column(String(50), nullable=True)
    shipping_zip_code = Column(String(20), nullable=True)
    shipping_country = Column(String(100), nullable=True)
    notes = Column(String(500), nullable=True)

    #optimistic locking dla zmian statusu
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=True)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
