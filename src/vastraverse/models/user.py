from sqlalchemy import CheckConstraint, Column, DateTime, Text

from vastraverse.db import Base, BigIntPK


class User(Base):
    """
    Represents a registered customer (or an admin managing the catalog).

    email is stored lowercased; the unique constraint is what guarantees one
    account per email, even under concurrent registrations.
    """

    __tablename__ = "users"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    address = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default="customer")
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("role IN ('customer','admin')", name="ck_user_role"),
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
