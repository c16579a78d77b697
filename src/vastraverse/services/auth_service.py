import logging
from datetime import timedelta
from typing import Any, Dict

import bcrypt
import jwt

from vastraverse.config import SecurityConfig
from vastraverse.exceptions import NotFoundError, UnauthorizedError
from vastraverse.repositories.user_repository import UserRepository
from vastraverse.utils.date_utils import DateUtils

logger = logging.getLogger(__name__)


class AuthService:
    """
    Registration, login and bearer-token handling.

    Tokens are HS256 JWTs whose ``sub`` claim is the user id; they expire
    after ``jwt_expiration_days`` (7 by default).
    """

    def __init__(self, user_repository: UserRepository, security: SecurityConfig):
        self.user_repo = user_repository
        self.security = security

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.security.bcrypt_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))

    def create_token(self, user_id: int) -> str:
        now = DateUtils.now_utc()
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + timedelta(days=self.security.jwt_expiration_days),
        }
        return jwt.encode(payload, self.security.jwt_secret_key, algorithm=self.security.jwt_algorithm)

    def decode_token(self, token: str) -> int:
        """Return the user id carried by a valid token."""
        try:
            payload = jwt.decode(
                token,
                self.security.jwt_secret_key,
                algorithms=[self.security.jwt_algorithm],
            )
            return int(payload["sub"])
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Token has expired")
        except (jwt.InvalidTokenError, KeyError, ValueError):
            raise UnauthorizedError("Not authorized, token failed")

    def register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create an account and sign it in.

        Raises:
            ConflictError: email already registered
        """
        email = data["email"]
        logger.info(f"Registering user {email}")

        role = "admin" if email in self.security.admin_emails else "customer"
        user_id = self.user_repo.create(
            {
                "name": data["name"],
                "email": email,
                "password_hash": self.hash_password(data["password"]),
                "phone": data["phone"],
                "address": data["address"],
                "role": role,
            }
        )
        user = self.user_repo.get_by_id(user_id)
        logger.info(f"User {user_id} registered")
        return {"token": self.create_token(user_id), "user": self.public_user(user)}

    def login(self, email: str, password: str) -> Dict[str, Any]:
        user = self.user_repo.get_by_email(email)
        # Same message for unknown email and wrong password
        if not user or not self.verify_password(password, user["password_hash"]):
            logger.warning(f"Failed login for {email}")
            raise UnauthorizedError("Invalid credentials")

        logger.info(f"User {user['id']} logged in")
        return {"token": self.create_token(int(user["id"])), "user": self.public_user(user)}

    def authenticate(self, token: str) -> Dict[str, Any]:
        """Resolve a bearer token to its (still existing) user row."""
        user = self.user_repo.get_by_id(self.decode_token(token))
        if not user:
            raise UnauthorizedError("Not authorized, user not found")
        return user

    def get_profile(self, user_id: int) -> Dict[str, Any]:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return self.public_user(user)

    def update_profile(self, user_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        if not self.user_repo.update_profile(user_id, changes):
            raise NotFoundError("User", user_id)
        logger.info(f"User {user_id} updated profile fields {sorted(changes)}")
        return self.get_profile(user_id)

    @staticmethod
    def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
        """User fields safe to send to clients (never the hash)."""
        return {
            "id": int(user["id"]),
            "name": user["name"],
            "email": user["email"],
            "phone": user["phone"],
            "address": user["address"],
            "role": user["role"],
            "createdAt": DateUtils.to_iso(user["created_at"]),
            "updatedAt": DateUtils.to_iso(user["updated_at"]),
        }
