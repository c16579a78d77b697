import logging

from flask import Blueprint, request

from vastraverse.routes.schemas import ProductQuerySchema, ProductSchema, ProductUpdateSchema, StockUpdateSchema
from vastraverse.routes.utils import admin_required, load_args, load_json, services, success_response

logger = logging.getLogger(__name__)

products_bp = Blueprint("products", __name__)

_query_schema = ProductQuerySchema()
_create_schema = ProductSchema()
_update_schema = ProductUpdateSchema()
_stock_schema = StockUpdateSchema()


# ---------------------------------------------------------------------- #
# Catalog reads (public)                                                   #
# ---------------------------------------------------------------------- #

@products_bp.route("", methods=["GET"])
def list_products():
    """All products, newest first. Optional category / collection filters and paging."""
    args = load_args(_query_schema)
    result = services().products.list_products(
        category=args.get("category"),
        collection=args.get("collection"),
        limit=args.get("limit"),
        offset=args["offset"],
    )
    return success_response(result, count=len(result["products"]))


@products_bp.route("/<int:product_id>", methods=["GET"])
def get_product(product_id: int):
    product = services().products.get_product(product_id)
    return success_response({"product": product})


@products_bp.route("/category/<category>", methods=["GET"])
def get_products_by_category(category: str):
    products = services().products.list_by_category(category)
    return success_response({"products": products}, count=len(products))


@products_bp.route("/search", methods=["GET"])
def search_products():
    products = services().products.search(request.args.get("q"))
    return success_response({"products": products}, count=len(products))


@products_bp.route("/men", methods=["GET"], defaults={"collection": "men"})
@products_bp.route("/women", methods=["GET"], defaults={"collection": "women"})
def list_collection(collection: str):
    logger.info(f"Fetching {collection} products")
    products = services().products.list_collection(collection)
    return success_response({"products": products}, count=len(products))


@products_bp.route("/<collection>/search", methods=["GET"])
def search_collection(collection: str):
    products = services().products.search(request.args.get("q"), collection=collection)
    return success_response({"products": products}, count=len(products))


@products_bp.route("/<collection>/<int:product_id>", methods=["GET"])
def get_collection_product(collection: str, product_id: int):
    product = services().products.get_collection_product(collection, product_id)
    return success_response({"product": product})


# ---------------------------------------------------------------------- #
# Catalog writes (admin)                                                   #
# ---------------------------------------------------------------------- #

@products_bp.route("", methods=["POST"])
@admin_required
def create_product():
    data = load_json(_create_schema)
    product = services().products.create_product(data)
    return success_response({"product": product}, "Product created successfully", 201)


@products_bp.route("/<int:product_id>", methods=["PUT"])
@admin_required
def update_product(product_id: int):
    data = load_json(_update_schema, partial=True)
    product = services().products.update_product(product_id, data)
    return success_response({"product": product}, "Product updated successfully")


@products_bp.route("/<int:product_id>", methods=["DELETE"])
@admin_required
def delete_product(product_id: int):
    services().products.delete_product(product_id)
    return success_response(message="Product deleted successfully")


@products_bp.route("/all", methods=["DELETE"])
@admin_required
def delete_all_products():
    deleted = services().products.delete_all_products()
    return success_response({"deleted": deleted}, "All products deleted successfully")


@products_bp.route("/<int:product_id>/stock", methods=["POST"])
@admin_required
def decrement_stock(product_id: int):
    """Take units out of stock; refuses rather than going below zero."""
    data = load_json(_stock_schema)
    services().products.decrement_stock(product_id, data["quantity"])
    product = services().products.get_product(product_id)
    return success_response({"product": product}, "Stock updated successfully")
