"""
Serverless entry points.

Each handler takes an API-gateway style event
``{"httpMethod", "body", "queryStringParameters", "headers"}`` and returns
``{"statusCode", "headers", "body"}`` with the same JSON envelope the Flask
API uses. Services are built once per cold start from the environment.
"""

import json
import logging
from functools import wraps
from typing import Any, Callable, Dict, Optional

from marshmallow import ValidationError as SchemaValidationError

from vastraverse.config import Config
from vastraverse.db import create_db_engine, init_db
from vastraverse.exceptions import APIError, UnauthorizedError, ValidationError
from vastraverse.routes.schemas import LoginSchema, OrderCreateSchema, RegisterSchema
from vastraverse.routes.utils import schema_error
from vastraverse.services import ServiceContainer, build_services
from vastraverse.utils.date_utils import DateUtils
from vastraverse.utils.validators import ValidationUtils

logger = logging.getLogger(__name__)

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
}

_services: Optional[ServiceContainer] = None


def configure(config: Config) -> ServiceContainer:
    """Wire the handlers to an explicit configuration."""
    global _services
    config.validate()
    engine = create_db_engine(config.database)
    init_db(engine)
    _services = build_services(config, engine)
    return _services


def get_services() -> ServiceContainer:
    if _services is None:
        return configure(Config.from_env())
    return _services


def _response(status_code: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(payload, default=str),
    }


def _json_body(event: Dict[str, Any]) -> Dict[str, Any]:
    raw = event.get("body")
    if not raw:
        raise ValidationError("Request body must be a JSON object")
    try:
        data = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError:
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _bearer_token(event: Dict[str, Any]) -> Optional[str]:
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    scheme, _, token = (headers.get("authorization") or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def serverless_handler(method: str, success_status: int = 200):
    """
    Turn ``f(event, services) -> (data, message)`` into a gateway handler.

    Wrong method -> 405, APIError -> its own status, anything else -> 500.
    """
    def decorator(f: Callable):
        @wraps(f)
        def wrapper(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
            if event.get("httpMethod") != method:
                return _response(405, {"success": False, "message": "Method Not Allowed"})
            try:
                data, message = f(event, get_services())
            except SchemaValidationError as e:
                err = schema_error(e)
                return _response(err.status_code, err.to_dict())
            except APIError as e:
                logger.warning(f"{f.__name__}: {e.message}")
                return _response(e.status_code, e.to_dict())
            except Exception:
                logger.exception(f"{f.__name__} failed")
                return _response(500, {
                    "success": False,
                    "message": "Internal Server Error",
                    "error_code": "INTERNAL",
                })

            payload: Dict[str, Any] = {"success": True, "timestamp": DateUtils.now_iso()}
            if message:
                payload["message"] = message
            payload["data"] = data
            return _response(success_status, payload)
        return wrapper
    return decorator


@serverless_handler("POST", 201)
def register_handler(event, services: ServiceContainer):
    data = RegisterSchema().load(_json_body(event))
    return services.auth.register(data), "User registered successfully"


@serverless_handler("POST")
def login_handler(event, services: ServiceContainer):
    data = LoginSchema().load(_json_body(event))
    return services.auth.login(data["email"], data["password"]), "Login successful"


@serverless_handler("POST", 201)
def create_order_handler(event, services: ServiceContainer):
    """Guest checkout; a valid bearer token links the order to the account."""
    data = OrderCreateSchema().load(_json_body(event))

    user_id = None
    token = _bearer_token(event)
    if token:
        try:
            user_id = int(services.auth.authenticate(token)["id"])
        except UnauthorizedError:
            user_id = None

    order = services.orders.create_order(data, user_id=user_id)
    return {"order": order}, "Order placed successfully!"


@serverless_handler("GET")
def get_user_orders_handler(event, services: ServiceContainer):
    """Orders for ``?email=``; same ownership rule as GET /api/orders/user/<email>."""
    email = ((event.get("queryStringParameters") or {}).get("email") or "").strip()
    if not email:
        raise ValidationError("Email is required")
    try:
        email = ValidationUtils.normalize_email(email)
    except ValueError:
        email = email.lower()

    token = _bearer_token(event)
    if not token:
        raise UnauthorizedError()
    user = services.auth.authenticate(token)

    orders = services.orders.list_orders_for_email(email, user)
    return {"orders": orders, "count": len(orders)}, None
