from datetime import datetime, timezone
from functools import wraps
from typing import Any, Dict, Optional

from flask import current_app, g, jsonify, request
from marshmallow import Schema
from marshmallow import ValidationError as SchemaValidationError

from vastraverse.exceptions import ForbiddenError, UnauthorizedError, ValidationError
from vastraverse.services import ServiceContainer


def success_response(data=None, message: Optional[str] = None, status: int = 200, **extra):
    """Consistent success response envelope."""
    response: Dict[str, Any] = {
        "success": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if message:
        response["message"] = message
    if data is not None:
        response["data"] = data
    response.update(extra)
    return jsonify(response), status


def services() -> ServiceContainer:
    return current_app.extensions["vastraverse"]


def load_json(schema: Schema, partial: bool = False) -> Dict[str, Any]:
    """Validate the JSON body against ``schema``; 400 with field errors otherwise."""
    data = request.get_json(silent=True)
    if data is None:
        raise ValidationError("Request body must be a JSON object")
    try:
        return schema.load(data, partial=partial)
    except SchemaValidationError as err:
        raise schema_error(err)


def load_args(schema: Schema) -> Dict[str, Any]:
    try:
        return schema.load(request.args.to_dict())
    except SchemaValidationError as err:
        raise schema_error(err)


def schema_error(err: SchemaValidationError) -> ValidationError:
    messages = err.messages if isinstance(err.messages, dict) else {"_schema": err.messages}
    missing = sorted(
        field for field, errors in messages.items()
        if isinstance(errors, list) and "Missing data for required field." in errors
    )
    if missing:
        message = f"Please provide {', '.join(missing)}"
    else:
        message = f"Invalid value for {', '.join(sorted(messages))}"
    return ValidationError(message, field_errors=messages)


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def authenticate_request() -> Dict[str, Any]:
    """Resolve the bearer token to ``g.current_user`` or raise 401."""
    token = bearer_token()
    if not token:
        raise UnauthorizedError()
    g.current_user = services().auth.authenticate(token)
    return g.current_user


def token_user_id() -> int:
    """User id from the bearer token, without loading the account."""
    token = bearer_token()
    if not token:
        raise UnauthorizedError()
    return services().auth.decode_token(token)


def login_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        authenticate_request()
        return f(*args, **kwargs)
    return wrapper


def admin_required(f):
    @wraps(f)
    @login_required
    def wrapper(*args, **kwargs):
        if g.current_user["role"] != "admin":
            raise ForbiddenError("Admin access required")
        return f(*args, **kwargs)
    return wrapper


def optional_user() -> Optional[Dict[str, Any]]:
    """Current user when a valid bearer token is present, else None."""
    token = bearer_token()
    if not token:
        return None
    try:
        return services().auth.authenticate(token)
    except UnauthorizedError:
        return None
