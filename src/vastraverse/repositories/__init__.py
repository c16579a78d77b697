from vastraverse.repositories.cart_repository import CartRepository
from vastraverse.repositories.order_repository import OrderRepository
from vastraverse.repositories.product_repository import ProductRepository
from vastraverse.repositories.user_repository import UserRepository
from vastraverse.repositories.wishlist_repository import WishlistRepository

__all__ = [
    "CartRepository",
    "OrderRepository",
    "ProductRepository",
    "UserRepository",
    "WishlistRepository",
]
