from typing import Any, Dict
import logging

from vastraverse.exceptions import InsufficientStockError, NotFoundError, ValidationError
from vastraverse.repositories.cart_repository import CartRepository
from vastraverse.repositories.product_repository import ProductRepository
from vastraverse.utils.formatting_utils import FormattingUtils

logger = logging.getLogger(__name__)


class CartService:
    """
    Server-side cart, keyed by (user, product).

    Quantities are checked against current stock on every write; stock
    itself only moves at checkout.
    """

    def __init__(self, cart_repository: CartRepository, product_repository: ProductRepository):
        self.cart_repo = cart_repository
        self.product_repo = product_repository

    def get_cart(self, user_id: int) -> Dict[str, Any]:
        items = self.cart_repo.get_items(user_id)
        total_cents = sum(item["line_total_cents"] for item in items)
        return {
            "items": items,
            "totalItems": sum(item["quantity"] for item in items),
            "totalPrice": FormattingUtils.from_cents(total_cents),
            "total_cents": total_cents,
            "is_empty": not items,
        }

    def add_item(self, user_id: int, product_id: int, quantity: int = 1) -> Dict[str, Any]:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        product = self._require_product(product_id)
        current = self.cart_repo.get_quantity(user_id, product_id) or 0
        if current + quantity > product["stock"]:
            raise InsufficientStockError(product_id, current + quantity, product["stock"])

        self.cart_repo.add_quantity(user_id, product_id, quantity)
        logger.info(f"User {user_id} added {quantity} x product {product_id} to cart")
        return self.get_cart(user_id)

    def update_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        """Set a line's quantity; 0 removes the line."""
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative")

        if quantity == 0:
            return self.remove_item(user_id, product_id)

        product = self._require_product(product_id)
        if quantity > product["stock"]:
            raise InsufficientStockError(product_id, quantity, product["stock"])

        if not self.cart_repo.set_quantity(user_id, product_id, quantity):
            raise NotFoundError("Cart item", product_id)
        return self.get_cart(user_id)

    def remove_item(self, user_id: int, product_id: int) -> Dict[str, Any]:
        if not self.cart_repo.remove(user_id, product_id):
            raise NotFoundError("Cart item", product_id)
        logger.info(f"User {user_id} removed product {product_id} from cart")
        return self.get_cart(user_id)

    def clear(self, user_id: int) -> Dict[str, Any]:
        removed = self.cart_repo.clear(user_id)
        logger.info(f"User {user_id} cleared cart ({removed} lines)")
        return self.get_cart(user_id)

    def _require_product(self, product_id: int) -> Dict[str, Any]:
        product = self.product_repo.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        return product
