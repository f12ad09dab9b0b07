"""
schemas/_validators.py — Field validators shared by several schemas.

Raised messages that equal an ErrorCode constant are surfaced with that code
by the ValidationError handler in app/__init__.py.
"""

from __future__ import annotations

from decimal import Decimal

from marshmallow import ValidationError

from modshop.app.errors import ErrorCode

# bcrypt refuses longer input.
MAX_PASSWORD_BYTES = 72

# Largest value a NUMERIC(10, 2) price column holds.
MAX_PRICE = Decimal("99999999.99")

# Row ids are SQLite INTEGERs (signed 64-bit).
MAX_ID = 2**63 - 1


def validate_non_empty_after_trim(value: str) -> None:
    """
    Raises ValidationError if the string is blank or contains only whitespace.
    validate.Length(min=1) alone lets "   " through.
    """
    if not value.strip():
        raise ValidationError("This field must not be blank or contain only whitespace.")


def validate_price(value: Decimal) -> None:
    """
    Prices are between 0 and MAX_PRICE with at most 2 decimal places.
    Extra precision is REJECTED, never rounded.
    """
    if value < Decimal("0"):
        raise ValidationError("Price must not be negative.")
    if value > MAX_PRICE:
        raise ValidationError(f"Price must not exceed {MAX_PRICE}.")

    # Decimal("10.123").as_tuple().exponent == -3  → 3 dp → reject
    if value.as_tuple().exponent < -2:
        raise ValidationError(ErrorCode.INVALID_PRICE_PRECISION)


def validate_password_strength(value: str) -> None:
    """Min 8 chars, at most 72 bytes (bcrypt input limit), at least one letter and one digit."""
    if len(value) < 8:
        raise ValidationError("Password must be at least 8 characters long.")
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must not be longer than {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded."
        )
    if not any(c.isalpha() for c in value):
        raise ValidationError("Password must contain at least one letter.")
    if not any(c.isdigit() for c in value):
        raise ValidationError("Password must contain at least one digit.")
