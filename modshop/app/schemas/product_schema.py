"""
schemas/product_schema.py — Marshmallow schemas for /products endpoints.

Prices are Decimal, non-negative, at most 2 decimal places
(INVALID_PRICE_PRECISION otherwise). Never Float.
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from modshop.app.schemas._validators import validate_non_empty_after_trim, validate_price


_name_rules = [validate.Length(min=1, max=200), validate_non_empty_after_trim]


class CreateProductSchema(Schema):
    """POST /products"""

    name = fields.Str(required=True, validate=_name_rules)
    description = fields.Str(load_default="")
    price = fields.Decimal(required=True, validate=validate_price)
    category = fields.Str(load_default="", validate=validate.Length(max=100))


class UpdateProductSchema(Schema):
    """PUT /products/:id — partial update; absent fields keep their value."""

    name = fields.Str(validate=_name_rules)
    description = fields.Str()
    price = fields.Decimal(validate=validate_price)
    category = fields.Str(validate=validate.Length(max=100))
