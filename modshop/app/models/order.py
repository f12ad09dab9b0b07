"""
models/order.py — Order table definition (main app).

An order joins a Customer (main app) to a Product (catalog package); this is
the one place a foreign key crosses a package boundary, which is why every
package registers its tables on the same `db` metadata.

FK policy: customer_id and product_id are ON DELETE RESTRICT. The services
refuse to delete a customer or product that orders still reference
(CUSTOMER_IN_USE / PRODUCT_IN_USE), so the constraint is the last resort.

`total_amount` is computed once from the product's price at the time the
order is written; later price changes do not touch existing orders.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, Numeric, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from modshop.app.extensions import db


class Order(db.Model):
    __tablename__ = "orders"

    __table_args__ = (
        # Also enforced by the marshmallow schema.
        CheckConstraint("quantity > 0", name="ck_orders_quantity_positive"),
        CheckConstraint("total_amount >= 0", name="ck_orders_total_nonnegative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    order_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )

    # ── Relationships ──────────────────────────────────────────────────────

    customer: Mapped["Customer"] = relationship(  # noqa: F821
        "Customer",
        back_populates="orders",
    )

    product: Mapped["Product"] = relationship(  # noqa: F821
        "Product",
        back_populates="orders",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<Order id={self.id} "
            f"customer_id={self.customer_id} "
            f"product_id={self.product_id} "
            f"total={self.total_amount}>"
        )
