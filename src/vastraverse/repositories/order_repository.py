import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.engine import Connection

from vastraverse.repositories.base import BaseRepository
from vastraverse.utils.date_utils import DateUtils
from vastraverse.utils.formatting_utils import FormattingUtils

logger = logging.getLogger(__name__)

ORDER_COLUMNS = """
    id, user_id, user_name, user_email, user_phone, location, total_cents,
    order_status, payment_status, created_at, updated_at
"""


class OrderRepository(BaseRepository):
    @property
    def table_name(self) -> str:
        return "orders"

    def insert_order(self, order: Dict[str, Any], items: List[Dict[str, Any]], conn: Connection) -> int:
        """Insert an order and its line items on the caller's transaction."""
        now = DateUtils.now_iso()
        order_id = self.execute_insert_returning_id(
            """
            INSERT INTO orders (
                user_id, user_name, user_email, user_phone, location, total_cents,
                order_status, payment_status, created_at, updated_at
            )
            VALUES (
                :user_id, :user_name, :user_email, :user_phone, :location, :total_cents,
                'pending', 'pending', :now, :now
            )
            """,
            {**order, "now": now},
            conn,
        )

        for item in items:
            self.execute_command(
                """
                INSERT INTO order_items (
                    order_id, product_id, product_name, product_price_cents,
                    product_image, quantity, collection, subtotal_cents
                )
                VALUES (
                    :order_id, :product_id, :product_name, :product_price_cents,
                    :product_image, :quantity, :collection, :subtotal_cents
                )
                """,
                {**item, "order_id": order_id},
                conn,
            )

        return order_id

    def get_by_id(self, order_id: int, conn: Optional[Connection] = None) -> Optional[Dict[str, Any]]:
        row = self.execute_single_query(
            f"SELECT {ORDER_COLUMNS} FROM orders WHERE id = :id", {"id": order_id}, conn
        )
        if not row:
            return None
        return self._to_order(row, self._items_for([order_id], conn).get(order_id, []))

    def list_all(self) -> List[Dict[str, Any]]:
        rows = self.execute_query(f"SELECT {ORDER_COLUMNS} FROM orders ORDER BY created_at DESC, id DESC")
        return self._with_items(rows)

    def list_by_email(self, email: str) -> List[Dict[str, Any]]:
        rows = self.execute_query(
            f"SELECT {ORDER_COLUMNS} FROM orders WHERE user_email = :email ORDER BY created_at DESC, id DESC",
            {"email": email},
        )
        return self._with_items(rows)

    def update_status(self, order_id: int, changes: Dict[str, str]) -> bool:
        fields = {k: v for k, v in changes.items() if k in ("order_status", "payment_status")}
        assignments = ", ".join(f"{name} = :{name}" for name in fields)
        return self.execute_command(
            f"UPDATE orders SET {assignments}, updated_at = :now WHERE id = :id",
            {**fields, "now": DateUtils.now_iso(), "id": order_id},
        ) > 0

    def _with_items(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        items_by_order = self._items_for([int(r["id"]) for r in rows])
        return [self._to_order(r, items_by_order.get(int(r["id"]), [])) for r in rows]

    def _items_for(
        self, order_ids: List[int], conn: Optional[Connection] = None
    ) -> Dict[int, List[Dict[str, Any]]]:
        """Line items for several orders in one query, grouped by order id."""
        if not order_ids:
            return {}
        placeholders = ", ".join(f":o{i}" for i in range(len(order_ids)))
        rows = self.execute_query(
            f"""
            SELECT id, order_id, product_id, product_name, product_price_cents,
                   product_image, quantity, collection, subtotal_cents
            FROM order_items
            WHERE order_id IN ({placeholders})
            ORDER BY id
            """,
            {f"o{i}": oid for i, oid in enumerate(order_ids)},
            conn,
        )
        grouped: Dict[int, List[Dict[str, Any]]] = {}
        for r in rows:
            grouped.setdefault(int(r["order_id"]), []).append(
                {
                    "product_id": int(r["product_id"]),
                    "product_name": r["product_name"],
                    "product_price": FormattingUtils.from_cents(r["product_price_cents"]),
                    "product_price_cents": int(r["product_price_cents"]),
                    "product_image": r["product_image"],
                    "quantity": int(r["quantity"]),
                    "collection": r["collection"],
                    "subtotal": FormattingUtils.from_cents(r["subtotal_cents"]),
                    "subtotal_cents": int(r["subtotal_cents"]),
                }
            )
        return grouped

    @staticmethod
    def _to_order(row: Dict[str, Any], items: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "id": int(row["id"]),
            "user_id": int(row["user_id"]) if row["user_id"] is not None else None,
            "user_name": row["user_name"],
            "user_email": row["user_email"],
            "user_phone": row["user_phone"],
            "location": row["location"],
            "products": items,
            "total_amount": FormattingUtils.from_cents(row["total_cents"]),
            "total_cents": int(row["total_cents"]),
            "order_status": row["order_status"],
            "payment_status": row["payment_status"],
            "created_at": DateUtils.to_iso(row["created_at"]),
            "updated_at": DateUtils.to_iso(row["updated_at"]),
        }
