"""
packages/accounts.py — Users, user groups and memberships package.

Contributes the `users`, `user_groups` and `user_user_groups` tables plus the
demo accounts:

    admin    → Administrators
    manager  → Managers, Users
    user     → Users

All demo accounts share the password DEMO_PASSWORD. The hash is computed at
registration time with the configured bcrypt cost so that no pre-computed
hash is shipped in the source tree.
"""

from __future__ import annotations

from datetime import datetime, timezone

import bcrypt

from modshop.app.models.membership import Membership
from modshop.app.models.user import User
from modshop.app.models.user_group import UserGroup

PACKAGE_NAME = "accounts"

DEMO_PASSWORD = "Password123!"

ADMINISTRATORS = "Administrators"
MANAGERS = "Managers"
USERS = "Users"


def _ts(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


SEED_GROUPS: list[dict] = [
    {
        "id": 1,
        "name": ADMINISTRATORS,
        "description": "System administrators with full access",
        "created_at": _ts(2024, 1, 1),
    },
    {
        "id": 2,
        "name": MANAGERS,
        "description": "Management team members",
        "created_at": _ts(2024, 1, 1),
    },
    {
        "id": 3,
        "name": USERS,
        "description": "Regular users",
        "created_at": _ts(2024, 1, 1),
    },
]

SEED_MEMBERSHIPS: list[dict] = [
    {"user_id": 1, "user_group_id": 1, "joined_at": _ts(2024, 1, 1)},
    {"user_id": 2, "user_group_id": 2, "joined_at": _ts(2024, 1, 5)},
    {"user_id": 2, "user_group_id": 3, "joined_at": _ts(2024, 1, 5)},
    {"user_id": 3, "user_group_id": 3, "joined_at": _ts(2024, 1, 10)},
]


def _seed_users(password_hash: str) -> list[dict]:
    accounts = [
        (1, "admin", "Admin", "User", _ts(2024, 1, 1)),
        (2, "manager", "Manager", "Smith", _ts(2024, 1, 5)),
        (3, "user", "Regular", "User", _ts(2024, 1, 10)),
    ]
    return [
        {
            "id": user_id,
            "username": username,
            "email": f"{username}@example.com",
            "password_hash": password_hash,
            "first_name": first_name,
            "last_name": last_name,
            "is_active": True,
            "created_at": created_at,
        }
        for user_id, username, first_name, last_name, created_at in accounts
    ]


def register(registry, config) -> None:
    registry.add_models(PACKAGE_NAME, User, UserGroup, Membership)

    rounds = config.get("BCRYPT_LOG_ROUNDS", 12)
    password_hash = bcrypt.hashpw(
        DEMO_PASSWORD.encode("utf-8"),
        bcrypt.gensalt(rounds=rounds),
    ).decode("utf-8")

    registry.add_seed_rows(PACKAGE_NAME, UserGroup, SEED_GROUPS)
    registry.add_seed_rows(PACKAGE_NAME, User, _seed_users(password_hash))
    registry.add_seed_rows(PACKAGE_NAME, Membership, SEED_MEMBERSHIPS)
