from flask import Blueprint, g, request

from vastraverse.routes.schemas import CartAddSchema, CartUpdateSchema
from vastraverse.routes.utils import authenticate_request, load_json, services, success_response

cart_bp = Blueprint("cart", __name__)

_add_schema = CartAddSchema()
_update_schema = CartUpdateSchema()


@cart_bp.before_request
def require_user():
    """Every cart route belongs to the signed-in user."""
    if request.method != "OPTIONS":
        authenticate_request()


def _user_id() -> int:
    return int(g.current_user["id"])


@cart_bp.route("", methods=["GET"])
def get_cart():
    return success_response(services().cart.get_cart(_user_id()))


@cart_bp.route("/add", methods=["POST"])
def add_to_cart():
    data = load_json(_add_schema)
    cart = services().cart.add_item(_user_id(), data["productId"], data["quantity"])
    return success_response(cart, "Added to cart!")


@cart_bp.route("/update", methods=["PUT"])
def update_cart_item():
    data = load_json(_update_schema)
    cart = services().cart.update_item(_user_id(), data["productId"], data["quantity"])
    return success_response(cart, "Cart updated")


@cart_bp.route("/remove/<int:product_id>", methods=["DELETE"])
def remove_from_cart(product_id: int):
    cart = services().cart.remove_item(_user_id(), product_id)
    return success_response(cart, "Removed from cart")


@cart_bp.route("/clear", methods=["DELETE"])
def clear_cart():
    return success_response(services().cart.clear(_user_id()), "Cart cleared")
