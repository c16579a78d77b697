from vastraverse.routes.auth import auth_bp
from vastraverse.routes.cart import cart_bp
from vastraverse.routes.orders import orders_bp
from vastraverse.routes.products import products_bp
from vastraverse.routes.wishlist import wishlist_bp

__all__ = ["auth_bp", "products_bp", "orders_bp", "cart_bp", "wishlist_bp"]
