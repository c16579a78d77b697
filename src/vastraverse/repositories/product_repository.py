import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.engine import Connection

from vastraverse.repositories.base import BaseRepository
from vastraverse.utils.date_utils import DateUtils
from vastraverse.utils.formatting_utils import FormattingUtils

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = """
    id, name, description, brand, category, collection, image,
    price_cents, stock, rating, sizes, created_at, updated_at
"""

# Columns a caller may change through update()
UPDATABLE_FIELDS = (
    "name", "description", "brand", "category", "collection",
    "image", "price_cents", "stock", "rating", "sizes",
)

LIKE_ESCAPE = "\\"


class ProductRepository(BaseRepository):
    """Catalog data access over the products table"""

    @property
    def table_name(self) -> str:
        return "products"

    def get_by_id(self, product_id: int, conn: Optional[Connection] = None) -> Optional[Dict[str, Any]]:
        row = self.execute_single_query(
            f"SELECT {PRODUCT_COLUMNS} FROM products WHERE id = :id",
            {"id": product_id},
            conn,
        )
        return self._to_product(row) if row else None

    def list(
        self,
        category: Optional[str] = None,
        collection: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """Products newest first, optionally filtered by category and/or collection."""
        query = f"SELECT {PRODUCT_COLUMNS} FROM products WHERE 1=1"
        params: Dict[str, Any] = {}

        if category:
            query += " AND LOWER(category) = :category"
            params["category"] = category.strip().lower()
        if collection:
            query += " AND collection = :collection"
            params["collection"] = collection

        query += " ORDER BY created_at DESC, id DESC"

        if limit is not None:
            query += " LIMIT :limit OFFSET :offset"
            params.update(limit=limit, offset=offset)

        return [self._to_product(r) for r in self.execute_query(query, params)]

    def count(self, category: Optional[str] = None, collection: Optional[str] = None) -> int:
        query = "SELECT COUNT(*) FROM products WHERE 1=1"
        params: Dict[str, Any] = {}
        if category:
            query += " AND LOWER(category) = :category"
            params["category"] = category.strip().lower()
        if collection:
            query += " AND collection = :collection"
            params["collection"] = collection
        return int(self.execute_scalar(query, params) or 0)

    def search(self, search_term: str, collection: Optional[str] = None) -> List[Dict[str, Any]]:
        """Case-insensitive substring match over name, description, category and brand."""
        query = f"""
            SELECT {PRODUCT_COLUMNS}
            FROM products
            WHERE (LOWER(name) LIKE :q ESCAPE :esc
                OR LOWER(description) LIKE :q ESCAPE :esc
                OR LOWER(category) LIKE :q ESCAPE :esc
                OR LOWER(brand) LIKE :q ESCAPE :esc)
        """
        params: Dict[str, Any] = {
            "q": f"%{self._escape_like(search_term.strip().lower())}%",
            "esc": LIKE_ESCAPE,
        }
        if collection:
            query += " AND collection = :collection"
            params["collection"] = collection
        query += " ORDER BY created_at DESC, id DESC"
        return [self._to_product(r) for r in self.execute_query(query, params)]

    def create(self, data: Dict[str, Any]) -> int:
        now = DateUtils.now_iso()
        return self.execute_insert_returning_id(
            """
            INSERT INTO products (
                name, description, brand, category, collection, image,
                price_cents, stock, rating, sizes, created_at, updated_at
            )
            VALUES (
                :name, :description, :brand, :category, :collection, :image,
                :price_cents, :stock, :rating, :sizes, :now, :now
            )
            """,
            {
                "name": data["name"],
                "description": data["description"],
                "brand": data.get("brand") or "VastraVerse",
                "category": data["category"],
                "collection": data.get("collection"),
                "image": data["image"],
                "price_cents": data["price_cents"],
                "stock": data.get("stock", 0),
                "rating": data.get("rating", 0),
                "sizes": json.dumps(data.get("sizes") or []),
                "now": now,
            },
        )

    def update(self, product_id: int, changes: Dict[str, Any]) -> bool:
        """Apply a partial update. Returns False when the product does not exist."""
        fields = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
        if "sizes" in fields:
            fields["sizes"] = json.dumps(fields["sizes"] or [])

        if not fields:
            return self.exists(product_id)

        assignments = ", ".join(f"{name} = :{name}" for name in fields)
        rowcount = self.execute_command(
            f"UPDATE products SET {assignments}, updated_at = :now WHERE id = :id",
            {**fields, "now": DateUtils.now_iso(), "id": product_id},
        )
        return rowcount > 0

    def delete(self, product_id: int) -> bool:
        return self.execute_command("DELETE FROM products WHERE id = :id", {"id": product_id}) > 0

    def delete_all(self) -> int:
        return self.execute_command("DELETE FROM products")

    def decrement_stock(self, product_id: int, quantity: int, conn: Optional[Connection] = None) -> bool:
        """
        Atomically take ``quantity`` units out of stock.

        The check and the write are one conditional UPDATE, so two concurrent
        checkouts can never both pass the check on the same units. Returns
        False when the product is missing or has fewer than ``quantity`` left.
        """
        rowcount = self.execute_command(
            """
            UPDATE products
            SET stock = stock - :qty, updated_at = :now
            WHERE id = :id AND stock >= :qty
            """,
            {"qty": quantity, "id": product_id, "now": DateUtils.now_iso()},
            conn,
        )
        return rowcount == 1

    def get_stock(self, product_id: int, conn: Optional[Connection] = None) -> Optional[int]:
        stock = self.execute_scalar("SELECT stock FROM products WHERE id = :id", {"id": product_id}, conn)
        return int(stock) if stock is not None else None

    @staticmethod
    def _escape_like(term: str) -> str:
        """Make % and _ in user input match literally."""
        return (
            term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
            .replace("%", LIKE_ESCAPE + "%")
            .replace("_", LIKE_ESCAPE + "_")
        )

    @staticmethod
    def _to_product(row: Dict[str, Any]) -> Dict[str, Any]:
        sizes = row.get("sizes")
        return {
            "id": int(row["id"]),
            "name": row["name"],
            "description": row["description"],
            "brand": row["brand"],
            "category": row["category"],
            "collection": row["collection"],
            "image": row["image"],
            "price": FormattingUtils.from_cents(row["price_cents"]),
            "price_cents": int(row["price_cents"]),
            "stock": int(row["stock"]),
            "in_stock": int(row["stock"]) > 0,
            "rating": float(row["rating"] or 0),
            "sizes": json.loads(sizes) if sizes else [],
            "created_at": DateUtils.to_iso(row["created_at"]),
            "updated_at": DateUtils.to_iso(row["updated_at"]),
        }
