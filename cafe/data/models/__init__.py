#import all models so SQLAlchemy registers them in Base.metadata

from cafe.data.models.user import UserModel
from cafe.data.models.cart import CartModel
from cafe.data.models.cart_item import CartItemModel
from cafe.data.models.order import OrderModel
from cafe.data.models.order_item import OrderItemModel

__all__ = ["UserModel", "CartModel", "CartItemModel", "OrderModel", "OrderItemModel"]
