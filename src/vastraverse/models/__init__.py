# Re-export all models from a single entry point so the rest of the app
# can import cleanly:
#   from vastraverse.models import User, Product, Order
#
# Importing all models here also ensures they are registered with Base.metadata
# before any call to Base.metadata.create_all().

from vastraverse.models.cart import CartItem, WishlistItem
from vastraverse.models.order import Order, OrderItem
from vastraverse.models.product import Product
from vastraverse.models.user import User

__all__ = [
    "User",
    "Product",
    "Order",
    "OrderItem",
    "CartItem",
    "WishlistItem",
]
