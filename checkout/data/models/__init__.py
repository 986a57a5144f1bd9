#import wszystkich modeli żeby SQLAlchemy je zarejestrował w base metadata

from checkout.data.models.user import UserModel
from checkout.data.models.cart import CartModel
from checkout.data.models.cart_item import CartItemModel
from checkout.data.models.order import OrderModel, OrderStatus
from checkout.data.models.order_item import OrderItemModel

__all__ = ["UserModel", "CartModel", "CartItemModel", "OrderModel", "OrderStatus", "OrderItemModel"]
