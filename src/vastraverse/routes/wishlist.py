from flask import Blueprint, g, request

from vastraverse.routes.schemas import WishlistItemSchema
from vastraverse.routes.utils import authenticate_request, load_json, services, success_response

wishlist_bp = Blueprint("wishlist", __name__)

_item_schema = WishlistItemSchema()


@wishlist_bp.before_request
def require_user():
    """Every wishlist route belongs to the signed-in user."""
    if request.method != "OPTIONS":
        authenticate_request()


def _user_id() -> int:
    return int(g.current_user["id"])


@wishlist_bp.route("", methods=["GET"])
def get_wishlist():
    return success_response(services().wishlist.get_wishlist(_user_id()))


@wishlist_bp.route("/add", methods=["POST"])
def add_to_wishlist():
    data = load_json(_item_schema)
    return success_response(services().wishlist.add(_user_id(), data["productId"]), "Added to wishlist!")


@wishlist_bp.route("/toggle", methods=["POST"])
def toggle_wishlist():
    data = load_json(_item_schema)
    result = services().wishlist.toggle(_user_id(), data["productId"])
    message = "Added to wishlist!" if result["in_wishlist"] else "Removed from wishlist"
    return success_response(result, message)


@wishlist_bp.route("/remove/<int:product_id>", methods=["DELETE"])
def remove_from_wishlist(product_id: int):
    return success_response(services().wishlist.remove(_user_id(), product_id), "Removed from wishlist")


@wishlist_bp.route("/move-to-cart/<int:product_id>", methods=["POST"])
def move_to_cart(product_id: int):
    return success_response(services().wishlist.move_to_cart(_user_id(), product_id), "Moved to cart")


@wishlist_bp.route("/clear", methods=["DELETE"])
def clear_wishlist():
    return success_response(services().wishlist.clear(_user_id()), "Wishlist cleared")
