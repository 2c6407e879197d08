#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from marketplace.data.models.category import CategoryModel
from marketplace.data.models.product import ProductModel
from marketplace.data.models.cart_item import CartItemModel
from marketplace.data.models.order import OrderModel
from marketplace.data.models.order_item import OrderItemModel

__all__ = ["CategoryModel", "ProductModel", "CartItemModel", "OrderModel", "OrderItemModel"]
