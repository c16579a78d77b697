from dataclasses import dataclass

from sqlalchemy.engine import Engine

from vastraverse.config import Config
from vastraverse.repositories import (
    CartRepository,
    OrderRepository,
    ProductRepository,
    UserRepository,
    WishlistRepository,
)
from vastraverse.services.auth_service import AuthService
from vastraverse.services.cart_service import CartService
from vastraverse.services.order_service import OrderService
from vastraverse.services.product_service import ProductService
from vastraverse.services.wishlist_service import WishlistService


@dataclass
class ServiceContainer:
    """Every service wired to one engine. Built once per app / function cold start."""
    engine: Engine
    auth: AuthService
    products: ProductService
    orders: OrderService
    cart: CartService
    wishlist: WishlistService


def build_services(config: Config, engine: Engine) -> ServiceContainer:
    product_repo = ProductRepository(engine)

    products = ProductService(product_repo, max_page_size=config.api.max_page_size)
    cart = CartService(CartRepository(engine), product_repo)

    return ServiceContainer(
        engine=engine,
        auth=AuthService(UserRepository(engine), config.security),
        products=products,
        orders=OrderService(OrderRepository(engine), products, config.api.receipt_timezone),
        cart=cart,
        wishlist=WishlistService(WishlistRepository(engine), product_repo, cart),
    )


__all__ = [
    "AuthService",
    "CartService",
    "OrderService",
    "ProductService",
    "ServiceContainer",
    "WishlistService",
    "build_services",
]
