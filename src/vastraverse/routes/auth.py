import logging

from flask import Blueprint

from vastraverse.routes.schemas import LoginSchema, ProfileUpdateSchema, RegisterSchema
from vastraverse.routes.utils import load_json, services, success_response, token_user_id

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)

_register_schema = RegisterSchema()
_login_schema = LoginSchema()
_profile_schema = ProfileUpdateSchema()


@auth_bp.route("/register", methods=["POST"])
def register():
    """Create an account; answers with a 7-day bearer token."""
    logger.info("Register request received")
    data = load_json(_register_schema)
    result = services().auth.register(data)
    return success_response(result, "User registered successfully", 201)


@auth_bp.route("/login", methods=["POST"])
def login():
    logger.info("Login request received")
    data = load_json(_login_schema)
    result = services().auth.login(data["email"], data["password"])
    return success_response(result, "Login successful")


@auth_bp.route("/profile", methods=["GET"])
def get_profile():
    # 404 rather than 401 when the account behind a valid token is gone
    user = services().auth.get_profile(token_user_id())
    return success_response({"user": user})


@auth_bp.route("/profile", methods=["PUT"])
def update_profile():
    user_id = token_user_id()
    changes = load_json(_profile_schema)
    user = services().auth.update_profile(user_id, changes)
    return success_response({"user": user}, "Profile updated successfully")
