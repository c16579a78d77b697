from typing import Any, Dict
import logging

from vastraverse.exceptions import ConflictError, NotFoundError
from vastraverse.repositories.product_repository import ProductRepository
from vastraverse.repositories.wishlist_repository import WishlistRepository
from vastraverse.services.cart_service import CartService

logger = logging.getLogger(__name__)


class WishlistService:
    def __init__(
        self,
        wishlist_repository: WishlistRepository,
        product_repository: ProductRepository,
        cart_service: CartService,
    ):
        self.wishlist_repo = wishlist_repository
        self.product_repo = product_repository
        self.cart_service = cart_service

    def get_wishlist(self, user_id: int) -> Dict[str, Any]:
        items = self.wishlist_repo.get_items(user_id)
        return {"items": items, "totalItems": len(items)}

    def add(self, user_id: int, product_id: int) -> Dict[str, Any]:
        if not self.product_repo.exists(product_id):
            raise NotFoundError("Product", product_id)
        if not self.wishlist_repo.add(user_id, product_id):
            raise ConflictError("Already in wishlist", conflict_field="productId")
        logger.info(f"User {user_id} wishlisted product {product_id}")
        return self.get_wishlist(user_id)

    def remove(self, user_id: int, product_id: int) -> Dict[str, Any]:
        if not self.wishlist_repo.remove(user_id, product_id):
            raise NotFoundError("Wishlist item", product_id)
        return self.get_wishlist(user_id)

    def toggle(self, user_id: int, product_id: int) -> Dict[str, Any]:
        if self.wishlist_repo.contains(user_id, product_id):
            wishlist = self.remove(user_id, product_id)
            in_wishlist = False
        else:
            wishlist = self.add(user_id, product_id)
            in_wishlist = True
        return {**wishlist, "in_wishlist": in_wishlist}

    def move_to_cart(self, user_id: int, product_id: int) -> Dict[str, Any]:
        """Add one unit to the cart, then drop the wishlist entry."""
        if not self.wishlist_repo.contains(user_id, product_id):
            raise NotFoundError("Wishlist item", product_id)

        cart = self.cart_service.add_item(user_id, product_id, 1)
        self.wishlist_repo.remove(user_id, product_id)
        logger.info(f"User {user_id} moved product {product_id} from wishlist to cart")
        return {"wishlist": self.get_wishlist(user_id), "cart": cart}

    def clear(self, user_id: int) -> Dict[str, Any]:
        self.wishlist_repo.clear(user_id)
        return self.get_wishlist(user_id)
