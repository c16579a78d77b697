from typing import Any, Dict, List, Optional
import logging

from vastraverse.exceptions import ForbiddenError, NotFoundError, ValidationError
from vastraverse.repositories.order_repository import OrderRepository
from vastraverse.services.product_service import ProductService
from vastraverse.utils.date_utils import DateUtils
from vastraverse.utils.formatting_utils import FormattingUtils

logger = logging.getLogger(__name__)

RECEIPT_WIDTH = 48


class OrderService:
    """
    Checkout and order history.

    Order creation is one transaction: every line's stock decrement and the
    order insert commit together or not at all.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        product_service: ProductService,
        receipt_timezone: str = "Asia/Kolkata",
    ):
        self.order_repo = order_repository
        self.product_service = product_service
        self.receipt_timezone = receipt_timezone

    def create_order(self, data: Dict[str, Any], user_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Place an order.

        The total is the sum of submitted price x quantity, computed in paise.

        Raises:
            ValidationError: empty product list
            NotFoundError: a line references a product not in the catalog
            InsufficientStockError: a product has too few units left
        """
        lines = data.get("products") or []
        if not lines:
            raise ValidationError("Please provide at least one product")

        items = []
        for line in lines:
            price_cents = FormattingUtils.to_cents(line["product_price"])
            if price_cents <= 0:
                raise ValidationError("Product price must be greater than 0")
            quantity = line.get("quantity") or 1
            items.append(
                {
                    "product_id": line["product_id"],
                    "product_name": line["product_name"],
                    "product_price_cents": price_cents,
                    "product_image": line.get("product_image") or "",
                    "quantity": quantity,
                    "collection": line.get("collection"),
                    "subtotal_cents": price_cents * quantity,
                }
            )

        total_cents = sum(item["subtotal_cents"] for item in items)

        # One decrement per product, in id order so concurrent checkouts
        # lock rows in the same sequence
        wanted: Dict[int, int] = {}
        for item in sorted(items, key=lambda i: i["product_id"]):
            wanted[item["product_id"]] = wanted.get(item["product_id"], 0) + item["quantity"]

        order = {
            "user_id": user_id,
            "user_name": data["user_name"],
            "user_email": data["user_email"],
            "user_phone": data["user_phone"],
            "location": data["location"],
            "total_cents": total_cents,
        }

        with self.order_repo.transaction() as conn:
            for product_id, quantity in wanted.items():
                self.product_service.decrement_stock(product_id, quantity, conn)
            order_id = self.order_repo.insert_order(order, items, conn)

        logger.info(
            f"Order {order_id} created for {order['user_email']}: "
            f"{len(items)} lines, total {FormattingUtils.format_money(total_cents)}"
        )
        return self.order_repo.get_by_id(order_id)

    def list_orders(self) -> List[Dict[str, Any]]:
        return self.order_repo.list_all()

    def list_orders_for_email(self, email: str, user: Dict[str, Any]) -> List[Dict[str, Any]]:
        if not email:
            raise ValidationError("User email is required")
        if user["role"] != "admin" and user["email"] != email:
            raise ForbiddenError("You can only view your own orders")

        orders = self.order_repo.list_by_email(email)
        logger.info(f"Found {len(orders)} orders for user: {email}")
        return orders

    def get_order(self, order_id: int, user: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        order = self.order_repo.get_by_id(order_id)
        if not order:
            raise NotFoundError("Order", order_id)
        if user is not None and not self._can_view(order, user):
            raise ForbiddenError("You can only view your own orders")
        return order

    def update_status(self, order_id: int, changes: Dict[str, str]) -> Dict[str, Any]:
        if not changes:
            raise ValidationError("Provide order_status and/or payment_status")
        if not self.order_repo.update_status(order_id, changes):
            raise NotFoundError("Order", order_id)
        logger.info(f"Order {order_id} status updated: {changes}")
        return self.order_repo.get_by_id(order_id)

    def render_receipt(self, order: Dict[str, Any]) -> str:
        """Plain-text receipt, amounts in INR, date in the receipt timezone."""
        rule = "-" * RECEIPT_WIDTH
        money = FormattingUtils.format_money
        lines = [
            "VASTRAVERSE".center(RECEIPT_WIDTH),
            "Order Receipt".center(RECEIPT_WIDTH),
            rule,
            f"Order #: {order['id']}",
            f"Date: {DateUtils.format_for_receipt(order['created_at'], self.receipt_timezone)}",
            f"Customer: {order['user_name']}",
            f"Email: {order['user_email']}",
            f"Phone: {order['user_phone']}",
            f"Deliver to: {order['location']}",
            rule,
            f"{'Item':<28}{'Qty':>5}{'Amount':>15}",
        ]
        for item in order["products"]:
            name = item["product_name"]
            if len(name) > 27:
                name = name[:24] + "..."
            lines.append(f"{name:<28}{item['quantity']:>5}{money(item['subtotal_cents']):>15}")
            lines.append(f"  @ {money(item['product_price_cents'])}")

        item_count = sum(item["quantity"] for item in order["products"])
        lines += [
            rule,
            self._receipt_row(f"Subtotal ({item_count} items):", money(order["total_cents"])),
            self._receipt_row("Shipping:", "FREE"),
            self._receipt_row("Total:", money(order["total_cents"])),
            rule,
            f"Order status: {order['order_status']} | Payment: {order['payment_status']}",
            "Thank you for shopping with VastraVerse!",
        ]
        return "\n".join(lines) + "\n"

    @staticmethod
    def _receipt_row(label: str, value: str) -> str:
        return f"{label:<{RECEIPT_WIDTH - 15}}{value:>15}"

    @staticmethod
    def _can_view(order: Dict[str, Any], user: Dict[str, Any]) -> bool:
        if user["role"] == "admin":
            return True
        if order["user_id"] is not None and order["user_id"] == int(user["id"]):
            return True
        return order["user_email"] == user["email"]
