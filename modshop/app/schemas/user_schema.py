"""
schemas/user_schema.py — Marshmallow schemas for /users endpoints.

Creation reuses RegisterSchema field rules. Updates are partial: every field
is optional and only the keys present in the payload are returned by load(),
which is how the service knows which columns to touch.

Username and password are not updatable through PUT /users/:id.
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from modshop.app.schemas.auth_schema import RegisterSchema


class CreateUserSchema(RegisterSchema):
    """POST /users — same rules as self-registration."""


class UpdateUserSchema(Schema):
    """PUT /users/:id — partial update."""

    email = fields.Email(validate=validate.Length(max=255))
    first_name = fields.Str(validate=validate.Length(max=100))
    last_name = fields.Str(validate=validate.Length(max=100))
    # Strings such as "false" or "no" are rejected.
    is_active = fields.Bool(truthy={True}, falsy={False})
