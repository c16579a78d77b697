from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, Float, Index, Integer, Text

from vastraverse.db import Base, BigIntPK


COLLECTIONS = ("men", "women")


class Product(Base):
    """
    A catalog item.

    price_cents stores the price as an integer number of paise to avoid
    floating-point rounding errors. Rs 1,299.50 -> 129950.

    sizes is a JSON-encoded list of size labels kept in a TEXT column so the
    same schema works on SQLite and PostgreSQL.

    collection is the storefront section (men / women); products created
    without one only show up in the generic listings.
    """

    __tablename__ = "products"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    brand = Column(Text, nullable=False, default="VastraVerse")
    category = Column(Text, nullable=False)
    collection = Column(Text, nullable=True)
    image = Column(Text, nullable=False)
    price_cents = Column(BigInteger, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    rating = Column(Float, nullable=False, default=0)
    sizes = Column(Text, nullable=False, default="[]")
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("price_cents > 0", name="ck_product_price"),
        # Last line of defence: stock can never go negative at the database level
        CheckConstraint("stock >= 0", name="ck_product_stock"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_product_rating"),
        CheckConstraint(
            "collection IS NULL OR collection IN ('men','women')",
            name="ck_product_collection",
        ),
        Index("ix_products_category", "category"),
        Index("ix_products_collection", "collection"),
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} stock={self.stock}>"
