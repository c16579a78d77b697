from typing import Any, Dict, List, Optional
import logging

from vastraverse.exceptions import InsufficientStockError, NotFoundError, ValidationError
from vastraverse.models.product import COLLECTIONS
from vastraverse.repositories.product_repository import ProductRepository
from vastraverse.utils.formatting_utils import FormattingUtils

logger = logging.getLogger(__name__)


class ProductService:
    """
    Product business logic service

    Responsibilities:
    - Catalog reads (listing, category and collection views, search)
    - Admin writes with price/stock rules
    - Atomic stock decrements
    """

    def __init__(self, product_repository: ProductRepository, max_page_size: int = 100):
        self.product_repo = product_repository
        self.max_page_size = max_page_size

    def list_products(
        self,
        category: Optional[str] = None,
        collection: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Dict[str, Any]:
        if collection is not None:
            self._check_collection(collection)
        if limit is not None:
            limit = min(limit, self.max_page_size)
        elif offset:
            # An offset alone still pages, one full page at a time
            limit = self.max_page_size

        products = self.product_repo.list(category=category, collection=collection, limit=limit, offset=offset)
        total = self.product_repo.count(category=category, collection=collection)
        return {
            "products": products,
            "pagination": {
                "count": len(products),
                "total": total,
                "limit": limit,
                "offset": offset,
                "has_more": limit is not None and offset + len(products) < total,
            },
        }

    def get_product(self, product_id: int) -> Dict[str, Any]:
        product = self.product_repo.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        return product

    def get_collection_product(self, collection: str, product_id: int) -> Dict[str, Any]:
        self._check_collection(collection)
        product = self.product_repo.get_by_id(product_id)
        if not product or product["collection"] != collection:
            raise NotFoundError("Product", product_id)
        return product

    def list_by_category(self, category: str) -> List[Dict[str, Any]]:
        if not category or not category.strip():
            raise ValidationError("Category is required")
        return self.product_repo.list(category=category)

    def list_collection(self, collection: str) -> List[Dict[str, Any]]:
        self._check_collection(collection)
        products = self.product_repo.list(collection=collection)
        logger.info(f"Found {len(products)} {collection} products")
        return products

    def search(self, search_term: Optional[str], collection: Optional[str] = None) -> List[Dict[str, Any]]:
        if not search_term or not search_term.strip():
            raise ValidationError("Please provide a search query")
        if collection is not None:
            self._check_collection(collection)
        return self.product_repo.search(search_term, collection=collection)

    def create_product(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self._check_price(data["price"])
        record = {
            "name": data["name"],
            "description": data["description"],
            "brand": data.get("brand"),
            "category": data["category"],
            "collection": data.get("collection"),
            "image": data["image"],
            "price_cents": FormattingUtils.to_cents(data["price"]),
            "stock": data.get("stock") or 0,
            "rating": data.get("rating") or 0,
            "sizes": data.get("sizes") or [],
        }
        product_id = self.product_repo.create(record)
        logger.info(f"Created product {product_id} ({record['name']})")
        return self.get_product(product_id)

    def update_product(self, product_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        changes = {k: v for k, v in data.items() if k != "price"}
        if "price" in data:
            self._check_price(data["price"])
            changes["price_cents"] = FormattingUtils.to_cents(data["price"])

        if not self.product_repo.update(product_id, changes):
            raise NotFoundError("Product", product_id)
        logger.info(f"Updated product {product_id}: {sorted(changes)}")
        return self.get_product(product_id)

    def delete_product(self, product_id: int) -> None:
        if not self.product_repo.delete(product_id):
            raise NotFoundError("Product", product_id)
        logger.info(f"Deleted product {product_id}")

    def delete_all_products(self) -> int:
        deleted = self.product_repo.delete_all()
        logger.warning(f"Deleted all products ({deleted} rows)")
        return deleted

    def decrement_stock(self, product_id: int, quantity: int, conn=None) -> None:
        """
        Take ``quantity`` units out of stock or fail without changing anything.

        Raises:
            NotFoundError: unknown product
            InsufficientStockError: fewer than ``quantity`` units left
        """
        if quantity <= 0:
            raise ValidationError("Quantity must be at least 1")

        if self.product_repo.decrement_stock(product_id, quantity, conn):
            return

        # The conditional update matched nothing: find out why
        stock = self.product_repo.get_stock(product_id, conn)
        if stock is None:
            raise NotFoundError("Product", product_id)
        logger.warning(f"Stock check failed for product {product_id}: {stock} < {quantity}")
        raise InsufficientStockError(product_id, quantity, stock)

    @staticmethod
    def _check_price(price) -> None:
        if price is None or price <= 0 or FormattingUtils.to_cents(price) <= 0:
            raise ValidationError("Price must be greater than 0")

    @staticmethod
    def _check_collection(collection: str) -> None:
        if collection not in COLLECTIONS:
            raise ValidationError('Invalid collection. Use "men" or "women"')
