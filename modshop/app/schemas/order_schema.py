"""
schemas/order_schema.py — Marshmallow schemas for /orders endpoints.

Validation responsibility:
  - This file: id and quantity types and ranges.
  - services/order_service.py:
      - INVALID_REFERENCE (422) — customer/product existence needs a DB lookup
      - total_amount computation from the product's current price

total_amount and order_date are never accepted from the client.
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from modshop.app.schemas._validators import MAX_ID

# Fits an SQLite INTEGER with room to spare; the order total has its own
# bound in order_service.
MAX_QUANTITY = 1_000_000

_quantity_range = validate.Range(
    min=1,
    max=MAX_QUANTITY,
    error=f"quantity must be between 1 and {MAX_QUANTITY}.",
)


def _positive_id(name: str, **kwargs) -> fields.Int:
    return fields.Int(
        strict=True,
        validate=validate.Range(
            min=1,
            max=MAX_ID,
            error=f"{name} must be a positive integer.",
        ),
        **kwargs,
    )


class CreateOrderSchema(Schema):
    """POST /orders"""

    customer_id = _positive_id("customer_id", required=True)
    product_id = _positive_id("product_id", required=True)
    quantity = fields.Int(
        required=True,
        strict=True,
        validate=_quantity_range,
    )


class UpdateOrderSchema(Schema):
    """PUT /orders/:id — partial update."""

    customer_id = _positive_id("customer_id")
    product_id = _positive_id("product_id")
    quantity = fields.Int(
        strict=True,
        validate=_quantity_range,
    )
