"""
models/product.py — Product table definition (catalog package).

No business logic. No imports from services or routes.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import CheckConstraint, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from modshop.app.extensions import db


class Product(db.Model):
    __tablename__ = "products"

    __table_args__ = (
        # Also enforced by the marshmallow schema.
        CheckConstraint("price >= 0", name="ck_products_price_nonnegative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    # NUMERIC(10, 2). Never Float.
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
    )

    category: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
    )

    # ── Relationships ──────────────────────────────────────────────────────
    # Declared by the main app's Order model; read-only navigation here.

    orders: Mapped[list["Order"]] = relationship(  # noqa: F821
        "Order",
        back_populates="product",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Product id={self.id} name={self.name!r} price={self.price}>"
