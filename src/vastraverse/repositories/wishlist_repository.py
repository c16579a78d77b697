from typing import Any, Dict, List, Optional

from sqlalchemy.engine import Connection

from vastraverse.repositories.base import BaseRepository
from vastraverse.utils.date_utils import DateUtils
from vastraverse.utils.formatting_utils import FormattingUtils


class WishlistRepository(BaseRepository):
    @property
    def table_name(self) -> str:
        return "wishlist_items"

    def get_items(self, user_id: int) -> List[Dict[str, Any]]:
        rows = self.execute_query(
            """
            SELECT w.product_id, w.created_at AS added_at,
                   p.name, p.image, p.category, p.collection, p.price_cents, p.stock
            FROM wishlist_items w
            JOIN products p ON p.id = w.product_id
            WHERE w.user_id = :uid
            ORDER BY w.id
            """,
            {"uid": user_id},
        )
        return [
            {
                "productId": int(r["product_id"]),
                "name": r["name"],
                "image": r["image"],
                "category": r["category"],
                "collection": r["collection"],
                "price": FormattingUtils.from_cents(r["price_cents"]),
                "stock": int(r["stock"]),
                "addedAt": DateUtils.to_iso(r["added_at"]),
            }
            for r in rows
        ]

    def add(self, user_id: int, product_id: int) -> bool:
        """Returns False when the product was already wishlisted."""
        rowcount = self.execute_command(
            """
            INSERT INTO wishlist_items (user_id, product_id, created_at)
            VALUES (:uid, :pid, :now)
            ON CONFLICT (user_id, product_id) DO NOTHING
            """,
            {"uid": user_id, "pid": product_id, "now": DateUtils.now_iso()},
        )
        return rowcount == 1

    def contains(self, user_id: int, product_id: int) -> bool:
        return self.execute_scalar(
            "SELECT 1 FROM wishlist_items WHERE user_id = :uid AND product_id = :pid",
            {"uid": user_id, "pid": product_id},
        ) is not None

    def remove(self, user_id: int, product_id: int, conn: Optional[Connection] = None) -> bool:
        return self.execute_command(
            "DELETE FROM wishlist_items WHERE user_id = :uid AND product_id = :pid",
            {"uid": user_id, "pid": product_id},
            conn,
        ) > 0

    def clear(self, user_id: int) -> int:
        return self.execute_command("DELETE FROM wishlist_items WHERE user_id = :uid", {"uid": user_id})
