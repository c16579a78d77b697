import logging
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from vastraverse.exceptions import ConflictError, DatabaseError
from vastraverse.repositories.base import BaseRepository
from vastraverse.utils.date_utils import DateUtils

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, name, email, password_hash, phone, address, role, created_at, updated_at"


class UserRepository(BaseRepository):
    @property
    def table_name(self) -> str:
        return "users"

    def get_by_id(self, user_id: int) -> Optional[Dict[str, Any]]:
        return self.execute_single_query(
            f"SELECT {USER_COLUMNS} FROM users WHERE id = :id", {"id": user_id}
        )

    def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return self.execute_single_query(
            f"SELECT {USER_COLUMNS} FROM users WHERE email = :email", {"email": email}
        )

    def create(self, data: Dict[str, Any]) -> int:
        """
        Insert a user. The unique index on email decides duplicates, so two
        racing registrations for one address cannot both succeed.

        Raises:
            ConflictError: email already registered
        """
        now = DateUtils.now_iso()
        try:
            with self.engine.begin() as conn:
                return int(
                    conn.execute(
                        text(
                            """
                            INSERT INTO users (
                                name, email, password_hash, phone, address, role,
                                created_at, updated_at
                            )
                            VALUES (
                                :name, :email, :password_hash, :phone, :address, :role,
                                :now, :now
                            )
                            RETURNING id
                            """
                        ),
                        {**data, "role": data.get("role", "customer"), "now": now},
                    ).scalar()
                )
        except IntegrityError:
            logger.warning(f"Duplicate registration for {data['email']}")
            raise ConflictError("User already exists with this email", conflict_field="email")
        except SQLAlchemyError as e:
            logger.error(f"User insert failed: {e}")
            raise DatabaseError(f"User insert failed: {e}", "INSERT")

    def update_profile(self, user_id: int, changes: Dict[str, Any]) -> bool:
        fields = {k: v for k, v in changes.items() if k in ("name", "phone", "address")}
        if not fields:
            return self.exists(user_id)
        assignments = ", ".join(f"{name} = :{name}" for name in fields)
        return self.execute_command(
            f"UPDATE users SET {assignments}, updated_at = :now WHERE id = :id",
            {**fields, "now": DateUtils.now_iso(), "id": user_id},
        ) > 0
