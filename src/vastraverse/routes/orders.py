import logging
from urllib.parse import unquote

from flask import Blueprint, Response, g

from vastraverse.routes.schemas import OrderCreateSchema, OrderStatusSchema
from vastraverse.routes.utils import (
    admin_required,
    load_json,
    login_required,
    optional_user,
    services,
    success_response,
)
from vastraverse.utils.validators import ValidationUtils

logger = logging.getLogger(__name__)

orders_bp = Blueprint("orders", __name__)

_create_schema = OrderCreateSchema()
_status_schema = OrderStatusSchema()


@orders_bp.route("", methods=["POST"])
def create_order():
    """
    Checkout.

    Public so guests can order; a valid bearer token links the order to the
    account. Stock for every line is taken in the same transaction as the
    order insert.
    """
    logger.info("Creating new order")
    data = load_json(_create_schema)
    user = optional_user()
    order = services().orders.create_order(data, user_id=int(user["id"]) if user else None)
    return success_response({"order": order}, "Order placed successfully!", 201)


@orders_bp.route("", methods=["GET"])
@admin_required
def list_orders():
    orders = services().orders.list_orders()
    return success_response({"orders": orders}, count=len(orders))


@orders_bp.route("/user/<path:email>", methods=["GET"])
@login_required
def get_orders_by_user(email: str):
    email = unquote(email).strip()
    try:
        email = ValidationUtils.normalize_email(email)
    except ValueError:
        email = email.lower()
    orders = services().orders.list_orders_for_email(email, g.current_user)
    return success_response({"orders": orders}, count=len(orders))


@orders_bp.route("/<int:order_id>", methods=["GET"])
@login_required
def get_order(order_id: int):
    order = services().orders.get_order(order_id, g.current_user)
    return success_response({"order": order})


@orders_bp.route("/<int:order_id>/status", methods=["PATCH"])
@admin_required
def update_order_status(order_id: int):
    changes = load_json(_status_schema)
    order = services().orders.update_status(order_id, changes)
    return success_response({"order": order}, "Order status updated")


@orders_bp.route("/<int:order_id>/receipt", methods=["GET"])
@login_required
def get_receipt(order_id: int):
    order = services().orders.get_order(order_id, g.current_user)
    receipt = services().orders.render_receipt(order)
    return Response(
        receipt,
        mimetype="text/plain",
        headers={"Content-Disposition": f'inline; filename="vastraverse-order-{order_id}.txt"'},
    )
