from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, ForeignKey, Integer, UniqueConstraint

from vastraverse.db import Base, BigIntPK


class CartItem(Base):
    """
    A product + quantity pair in a user's cart.

    quantity must be > 0 -- removing an item means deleting the row, not
    setting quantity to 0. The (user_id, product_id) unique constraint lets
    "add" be a single upsert.
    """

    __tablename__ = "cart_items"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(BigInteger, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_cart_user_product"),
        CheckConstraint("quantity > 0", name="ck_cart_item_quantity"),
    )

    def __repr__(self) -> str:
        return f"<CartItem user_id={self.user_id} product_id={self.product_id} qty={self.quantity}>"


class WishlistItem(Base):
    __tablename__ = "wishlist_items"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(BigInteger, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_wishlist_user_product"),
    )

    def __repr__(self) -> str:
        return f"<WishlistItem user_id={self.user_id} product_id={self.product_id}>"
