"""
tests/integration/test_database.py — Package composition and seeding.
"""

from __future__ import annotations

from flask import Flask
from sqlalchemy import func, select, text

from modshop.app.database import build_registry, database_url, init_database, seed_database
from modshop.app.extensions import db
from modshop.app.models.membership import Membership
from modshop.app.models.order import Order
from modshop.app.models.product import Product
from modshop.app.models.user import User


def _row_count(model) -> int:
    return db.session.execute(select(func.count()).select_from(model)).scalar_one()


def test_registry_lists_packages_in_dependency_order(app):
    registry = build_registry(app.config)
    assert registry.packages == ["catalog", "accounts", "main"]


def test_every_package_table_exists(app):
    with app.app_context():
        tables = set(db.metadata.tables)
    assert {
        "products", "users", "user_groups", "user_user_groups", "customers", "orders",
    } <= tables


def test_seed_counts(app):
    with app.app_context():
        assert _row_count(Product) == 3
        assert _row_count(User) == 3
        assert _row_count(Membership) == 4
        assert _row_count(Order) == 2


def test_seeding_twice_inserts_nothing(app):
    with app.app_context():
        inserted = seed_database(build_registry(app.config), db.session)
        db.session.commit()
        assert inserted == 0
        assert _row_count(Product) == 3


def test_restart_keeps_modified_rows(app, client):
    client.put("/api/v1/products/1", json={"name": "Renamed Widget"})

    init_database(app)

    resp = client.get("/api/v1/products/1")
    assert resp.get_json()["data"]["name"] == "Renamed Widget"


def test_foreign_keys_are_enforced(app):
    with app.app_context():
        fk_on = db.session.execute(text("PRAGMA foreign_keys")).scalar_one()
    assert fk_on == 1


def test_database_url_of_testing_app_is_in_memory(app):
    assert database_url(app) == "sqlite://"


def test_relative_sqlite_url_resolves_into_instance_folder(tmp_path):
    bare = Flask("modshop.app", instance_path=str(tmp_path))
    bare.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///app.db"
    db.init_app(bare)

    assert database_url(bare) == f"sqlite:///{tmp_path / 'app.db'}"


def test_sqlalchemy_is_the_only_registered_extension(app):
    assert list(app.extensions) == ["sqlalchemy"]
