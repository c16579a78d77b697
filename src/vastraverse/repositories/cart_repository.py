import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.engine import Connection

from vastraverse.repositories.base import BaseRepository
from vastraverse.utils.date_utils import DateUtils
from vastraverse.utils.formatting_utils import FormattingUtils

logger = logging.getLogger(__name__)


class CartRepository(BaseRepository):
    """Repository for per-user shopping cart rows"""

    @property
    def table_name(self) -> str:
        return "cart_items"

    def get_items(self, user_id: int) -> List[Dict[str, Any]]:
        """Cart lines joined with current catalog data, oldest first."""
        rows = self.execute_query(
            """
            SELECT
                ci.product_id,
                ci.quantity,
                ci.created_at   AS added_at,
                p.name,
                p.image,
                p.category,
                p.collection,
                p.price_cents,
                p.stock
            FROM cart_items ci
            JOIN products p ON p.id = ci.product_id
            WHERE ci.user_id = :uid
            ORDER BY ci.id
            """,
            {"uid": user_id},
        )
        return [self._to_item(r) for r in rows]

    def get_quantity(self, user_id: int, product_id: int, conn: Optional[Connection] = None) -> Optional[int]:
        qty = self.execute_scalar(
            "SELECT quantity FROM cart_items WHERE user_id = :uid AND product_id = :pid",
            {"uid": user_id, "pid": product_id},
            conn,
        )
        return int(qty) if qty is not None else None

    def add_quantity(self, user_id: int, product_id: int, quantity: int, conn: Optional[Connection] = None) -> None:
        """Insert the line or increment it in one statement."""
        now = DateUtils.now_iso()
        self.execute_command(
            """
            INSERT INTO cart_items (user_id, product_id, quantity, created_at, updated_at)
            VALUES (:uid, :pid, :qty, :now, :now)
            ON CONFLICT (user_id, product_id)
            DO UPDATE SET quantity = cart_items.quantity + EXCLUDED.quantity,
                          updated_at = EXCLUDED.updated_at
            """,
            {"uid": user_id, "pid": product_id, "qty": quantity, "now": now},
            conn,
        )

    def set_quantity(self, user_id: int, product_id: int, quantity: int) -> bool:
        return self.execute_command(
            """
            UPDATE cart_items SET quantity = :qty, updated_at = :now
            WHERE user_id = :uid AND product_id = :pid
            """,
            {"qty": quantity, "now": DateUtils.now_iso(), "uid": user_id, "pid": product_id},
        ) > 0

    def remove(self, user_id: int, product_id: int, conn: Optional[Connection] = None) -> bool:
        return self.execute_command(
            "DELETE FROM cart_items WHERE user_id = :uid AND product_id = :pid",
            {"uid": user_id, "pid": product_id},
            conn,
        ) > 0

    def clear(self, user_id: int) -> int:
        return self.execute_command("DELETE FROM cart_items WHERE user_id = :uid", {"uid": user_id})

    @staticmethod
    def _to_item(row: Dict[str, Any]) -> Dict[str, Any]:
        line_total = int(row["price_cents"]) * int(row["quantity"])
        return {
            "productId": int(row["product_id"]),
            "name": row["name"],
            "image": row["image"],
            "category": row["category"],
            "collection": row["collection"],
            "price": FormattingUtils.from_cents(row["price_cents"]),
            "quantity": int(row["quantity"]),
            "stock": int(row["stock"]),
            "lineTotal": FormattingUtils.from_cents(line_total),
            "line_total_cents": line_total,
            "addedAt": DateUtils.to_iso(row["added_at"]),
        }
