"""
schemas/auth_schema.py — Marshmallow schemas for authentication endpoints.

Validation responsibility:
  - This file: field types, lengths, formats, regex patterns.
  - services/auth_service.py: DUPLICATE_EMAIL / DUPLICATE_USERNAME checks
    (cross-entity: require a DB lookup — not a schema concern).

All schemas inherit from marshmallow.Schema and load without a Flask app
context, so unit tests can use them directly.
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from modshop.app.schemas._validators import validate_password_strength


class RegisterSchema(Schema):
    """
    POST /auth/register  (also the body of POST /users)

    Field rules:
      username   : 3–50 chars, alphanumeric + underscore only
      email      : valid email format
      password   : min 8 chars, at least one letter and one digit
      first_name : optional, max 100 chars
      last_name  : optional, max 100 chars
    """

    username = fields.Str(
        required=True,
        validate=[
            validate.Length(
                min=3,
                max=50,
                error="Username must be between 3 and 50 characters.",
            ),
            validate.Regexp(
                r"^[a-zA-Z0-9_]+$",
                error="Username may only contain letters, numbers, and underscores.",
            ),
        ],
    )

    email = fields.Email(
        required=True,
        validate=validate.Length(max=255),
    )

    password = fields.Str(
        required=True,
        load_only=True,
        validate=validate_password_strength,
    )

    first_name = fields.Str(load_default="", validate=validate.Length(max=100))
    last_name = fields.Str(load_default="", validate=validate.Length(max=100))


class LoginSchema(Schema):
    """
    POST /auth/login

    Accepts username (not email) + password. Credential correctness
    is checked in auth_service.py (INVALID_CREDENTIALS, 401).
    """

    username = fields.Str(required=True)
    password = fields.Str(required=True, load_only=True)
