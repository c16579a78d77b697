from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import relationship

from vastraverse.db import Base, BigIntPK


ORDER_STATUSES = ("pending", "confirmed", "shipped", "delivered", "cancelled")
PAYMENT_STATUSES = ("pending", "paid", "failed")


class Order(Base):
    """
    A purchase placed from the storefront checkout.

    The customer's name, email, phone and delivery location are copied onto
    the order so it stays readable even if the account changes or is deleted.
    user_id is only set when the checkout request carried a valid token.

    total_cents is stored alongside order_items so the charged amount is
    preserved even if catalog prices change later.
    """

    __tablename__ = "orders"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    user_name = Column(Text, nullable=False)
    user_email = Column(Text, nullable=False)
    user_phone = Column(Text, nullable=False)
    location = Column(Text, nullable=False)
    total_cents = Column(BigInteger, nullable=False)
    order_status = Column(Text, nullable=False, default="pending")
    payment_status = Column(Text, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "order_status IN ('pending','confirmed','shipped','delivered','cancelled')",
            name="ck_order_status",
        ),
        CheckConstraint(
            "payment_status IN ('pending','paid','failed')",
            name="ck_order_payment_status",
        ),
        CheckConstraint("total_cents >= 0", name="ck_order_total"),
        Index("ix_orders_user_email", "user_email"),
        Index("ix_orders_created_at", "created_at"),
    )

    # cascade='all, delete-orphan' -> deleting an order removes its line items
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Order id={self.id} status={self.order_status!r} total_cents={self.total_cents}>"


class OrderItem(Base):
    """
    A single line item within an order.

    product_id is deliberately not a foreign key: products can be deleted
    (including via "delete all") without touching historical orders. Name,
    price and image are snapshotted at checkout.
    """

    __tablename__ = "order_items"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    order_id = Column(BigInteger, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(BigInteger, nullable=False)
    product_name = Column(Text, nullable=False)
    product_price_cents = Column(BigInteger, nullable=False)
    product_image = Column(Text, nullable=False, default="")
    quantity = Column(Integer, nullable=False)
    collection = Column(Text, nullable=True)
    subtotal_cents = Column(BigInteger, nullable=False)

    __table_args__ = (
        CheckConstraint("product_price_cents > 0", name="ck_item_price"),
        CheckConstraint("quantity > 0", name="ck_item_quantity"),
        CheckConstraint("subtotal_cents >= 0", name="ck_item_subtotal"),
    )

    order = relationship("Order", back_populates="items")

    def __repr__(self) -> str:
        return f"<OrderItem id={self.id} product_id={self.product_id} qty={self.quantity}>"
