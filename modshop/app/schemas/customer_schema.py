"""
schemas/customer_schema.py — Marshmallow schemas for /customers endpoints.
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from modshop.app.schemas._validators import validate_non_empty_after_trim


_name_rules = [validate.Length(min=1, max=200), validate_non_empty_after_trim]


class CreateCustomerSchema(Schema):
    """POST /customers — registered_date is set by the server."""

    name = fields.Str(required=True, validate=_name_rules)
    email = fields.Email(required=True, validate=validate.Length(max=255))


class UpdateCustomerSchema(Schema):
    """PUT /customers/:id — partial update."""

    name = fields.Str(validate=_name_rules)
    email = fields.Email(validate=validate.Length(max=255))
