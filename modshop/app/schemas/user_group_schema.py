"""
schemas/user_group_schema.py — Marshmallow schemas for /usergroups endpoints.

Validation responsibility:
  - This file: field types, string lengths, non-empty checks (including trim).
  - services/user_group_service.py:
      - DUPLICATE_GROUP_NAME, USER_NOT_FOUND, GROUP_NOT_FOUND, ALREADY_MEMBER
        (all require a DB lookup)

Plain marshmallow.Schema classes; no Flask app context needed.
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from modshop.app.schemas._validators import MAX_ID, validate_non_empty_after_trim


_name_field_rules = [
    validate.Length(
        min=1,
        max=100,
        error="Group name must be between 1 and 100 characters.",
    ),
    validate_non_empty_after_trim,
]


class CreateUserGroupSchema(Schema):
    """POST /usergroups"""

    name = fields.Str(required=True, validate=_name_field_rules)
    description = fields.Str(load_default="")


class UpdateUserGroupSchema(Schema):
    """PUT /usergroups/:id — partial update."""

    name = fields.Str(validate=_name_field_rules)
    description = fields.Str()


class AddUserToGroupSchema(Schema):
    """POST /usergroups/:id/users"""

    # Whether the user exists is a DB concern (USER_NOT_FOUND, 404).
    user_id = fields.Int(
        required=True,
        strict=True,  # reject floats like 1.0
        validate=validate.Range(
            min=1,
            max=MAX_ID,
            error="user_id must be a positive integer.",
        ),
    )
