from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from marketplace.data.database import Base


class OrderItemModel(Base):
    """Snapshot nazwy i ceny z chwili zamowienia, nigdy nie modyfikowany."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    #bez FK: produkt moze zniknac, snapshot zostaje
    product_id = Column(Integer, nullable=False)

    product_name = Column(String(200), nullable=False)
    price = Column(Numeric(18, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    subtotal = Column(Numeric(18, 2), nullable=False)

    order = relationship("OrderModel", back_populates="items")
