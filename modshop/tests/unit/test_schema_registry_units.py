"""
Unit tests for the schema registry and idempotent seeding.

The session is mocked; no Flask app or database.
"""

from __future__ import annotations

from unittest.mock import MagicMock

from modshop.app.database import SchemaRegistry, seed_database
from modshop.app.models.product import Product
from modshop.app.packages import accounts, catalog


def test_registry_preserves_package_order():
    registry = SchemaRegistry()
    catalog.register(registry, {})
    accounts.register(registry, {"BCRYPT_LOG_ROUNDS": 4})

    assert registry.packages == ["catalog", "accounts"]
    assert [s.model.__tablename__ for s in registry.seed_sets] == [
        "products", "user_groups", "users", "user_user_groups",
    ]


def test_accounts_seed_never_stores_plain_password():
    registry = SchemaRegistry()
    accounts.register(registry, {"BCRYPT_LOG_ROUNDS": 4})

    users = next(s for s in registry.seed_sets if s.model.__tablename__ == "users")
    for row in users.rows:
        assert row["password_hash"] != accounts.DEMO_PASSWORD
        assert row["password_hash"].startswith("$2b$")


def test_seed_database_skips_existing_rows():
    registry = SchemaRegistry()
    catalog.register(registry, {})
    session = MagicMock()
    # Product 1 already exists; 2 and 3 do not.
    session.get.side_effect = [object(), None, None]

    inserted = seed_database(registry, session)

    assert inserted == 2
    assert session.add.call_count == 2
    added = [call.args[0] for call in session.add.call_args_list]
    assert all(isinstance(p, Product) for p in added)
    assert [p.id for p in added] == [2, 3]


def test_seed_database_looks_up_composite_keys():
    registry = SchemaRegistry()
    accounts.register(registry, {"BCRYPT_LOG_ROUNDS": 4})
    session = MagicMock()
    session.get.return_value = object()

    inserted = seed_database(registry, session)

    assert inserted == 0
    membership_lookups = [
        call.args[1] for call in session.get.call_args_list
        if call.args[0].__tablename__ == "user_user_groups"
    ]
    assert (1, 1) in membership_lookups
    assert (2, 3) in membership_lookups
