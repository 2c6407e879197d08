"""End-to-end przebiegi na warstwie serwisow (koszyk -> zamowienie -> anulowanie)."""

from decimal import Decimal

import pytest

from marketplace.domain.access import Role
from marketplace.domain.errors import CapacityExceededError
from marketplace.domain.schemas import ProductIn
from marketplace.domain.status import OrderStatus, ProductStatus
from marketplace.services.cart_service import CartService
from marketplace.services.order_service import OrderService
from marketplace.services.product_service import ProductService

CUSTOMER_ID = 10


def test_purchase_and_cancellation(db, make_product, admin, stock_of):
    product = make_product(name="Headphones", price="10.00", stock=5)
    carts = CartService(db)
    orders = OrderService(db)

    line = carts.add_item(CUSTOMER_ID, product.id, 3)
    assert line["subtotal"] == Decimal("30.00")

    with pytest.raises(CapacityExceededError):
        carts.add_item(CUSTOMER_ID, product.id, 3)
    assert carts.list_items(CUSTOMER_ID)[0]["quantity"] == 3

    carts.update_item(line["id"], CUSTOMER_ID, 5)
    assert carts.total(CUSTOMER_ID) == Decimal("50.00")

    order = orders.create_from_cart(CUSTOMER_ID)
    assert order["total_amount"] == Decimal("50.00")
    assert order["status"] == OrderStatus.PENDING.value
    assert stock_of(product.id) == 0
    assert carts.list_items(CUSTOMER_ID) == []

    cancelled = orders.update_status(order["id"], "Cancelled", admin)
    assert cancelled["status"] == OrderStatus.CANCELLED.value
    assert stock_of(product.id) == 5


def test_seller_edit_resubmits_without_touching_orders(db, category, seller, admin):
    products = ProductService(db)
    carts = CartService(db)
    orders = OrderService(db)

    created = products.create_product(
        ProductIn(name="Mug", price=Decimal("12.00"), stock_quantity=10, category_id=category.id),
        seller,
    )
    products.moderate(created["id"], True, admin)

    carts.add_item(CUSTOMER_ID, created["id"], 2)
    order = orders.create_from_cart(CUSTOMER_ID)

    edited = products.update_product(
        created["id"],
        ProductIn(name="Mug", price=Decimal("15.00"), stock_quantity=8, category_id=category.id),
        seller,
    )

    assert edited["status"] == ProductStatus.PENDING.value
    assert edited["approved_by_user_id"] is None
    assert edited["approved_at"] is None

    kept = orders.get_order(order["id"], CUSTOMER_ID, Role.CUSTOMER)
    assert kept["items"][0]["price"] == Decimal("12.00")
    assert kept["total_amount"] == Decimal("24.00")
    assert kept["status"] == OrderStatus.PENDING.value
