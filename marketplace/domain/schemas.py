# marketplace/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field


# =====================================================
# PRODUCTS
# =====================================================
class ProductIn(BaseModel):
    """Schema dla tworzenia i edycji produktu."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    price: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2, description="Cena (musi być > 0)")
    stock_quantity: int = Field(..., ge=0, description="Stan magazynowy (nie może być ujemny)")
    image_url: str | None = Field(None, max_length=500)
    category_id: int = Field(..., gt=0)


class ProductOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    price: Decimal
    stock_quantity: int
    image_url: str | None = None
    category_id: int
    category_name: str = ""
    created_by_user_id: int
    status: str
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None
    approved_at: datetime | None = None
    approved_by_user_id: int | None = None

    model_config = ConfigDict(from_attributes=True)


class ModerationIn(BaseModel):
    """approved=True zatwierdza, False odrzuca."""

    product_id: int = Field(..., gt=0)
    approved: bool


# =====================================================
# CART
# =====================================================
class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(..., gt=0, description="Ilość produktu (musi być > 0)")


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., gt=0, description="Nowa ilość (musi być > 0)")


class CartItemOut(BaseModel):
    """Pozycja koszyka - cena zawsze liczona z aktualnego katalogu."""

    id: int
    product_id: int
    product_name: str
    product_price: Decimal
    product_image_url: str | None = None
    quantity: int
    subtotal: Decimal
    created_at: datetime


class CartOut(BaseModel):
    user_id: int
    items: List[CartItemOut]
    total: Decimal
    item_count: int


class CartTotalOut(BaseModel):
    user_id: int
    total: Decimal


# =====================================================
# ORDERS
# =====================================================
class ShippingInfo(BaseModel):
    """Dane wysylki i notatka - wszystko opcjonalne."""

    shipping_address: str | None = Field(None, max_length=200)
    shipping_city: str | None = Field(None, max_length=100)
    shipping_state: str | None = Field(None, max_length=50)
    shipping_zip_code: str | None = Field(None, max_length=20)
    shipping_country: str | None = Field(None, max_length=100)
    notes: str | None = Field(None, max_length=500)


class OrderItemOut(BaseModel):
    id: int
    product_id: int
    product_name: str
    price: Decimal
    quantity: int
    subtotal: Decimal


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: int
    user_id: int
    status: str
    total_amount: Decimal
    shipping_address: str | None = None
    shipping_city: str | None = None
    shipping_state: str | None = None
    shipping_zip_code: str | None = None
    shipping_country: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    items: List[OrderItemOut]


class OrderStatusUpdate(BaseModel):
    order_id: int = Field(..., gt=0)
    #walidacja wartosci w serwisie (InvalidStateError z lista poprawnych)
    status: str = Field(..., min_length=1, max_length=50)


class MessageOut(BaseModel):
    success: bool = True
    message: str
