"""
database.py — Shared data context: schema composition and seeding.

The main app owns the schema. Feature packages (app/packages/) never touch
the database at import time; they only append their models and seed rows to
a SchemaRegistry when the main app asks them to:

    registry = build_registry(app.config)
    # catalog  → products
    # accounts → user_groups, users, user_user_groups
    # main app → customers, orders

init_database() then creates every table on the shared `db` metadata and
inserts the collected seed rows. Seeding is idempotent: a row is inserted
only when no row with the same primary key exists, so restarting the process
never duplicates or overwrites data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from flask import Flask
from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

from modshop.app.extensions import db
from modshop.app.models.customer import Customer
from modshop.app.models.order import Order
from modshop.app.packages import accounts, catalog

MAIN_APP = "main"


@dataclass
class SeedSet:
    """Seed rows contributed by one package for one model."""
    package: str
    model: type
    rows: list[dict]


@dataclass
class SchemaRegistry:
    """
    Ordered collection of package contributions to the shared schema.

    Seed sets are applied in the order they were added, which is the order
    build_registry() calls the packages. A package that references another
    package's rows (orders → products) must therefore register after it.
    """
    models: dict[str, list[type]] = field(default_factory=dict)
    seed_sets: list[SeedSet] = field(default_factory=list)

    def add_models(self, package: str, *models: type) -> None:
        self.models.setdefault(package, []).extend(models)

    def add_seed_rows(self, package: str, model: type, rows: list[dict]) -> None:
        self.seed_sets.append(SeedSet(package=package, model=model, rows=list(rows)))

    @property
    def packages(self) -> list[str]:
        return list(self.models.keys())


# ── Main app contribution ──────────────────────────────────────────────────

def _ts(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


SEED_CUSTOMERS: list[dict] = [
    {
        "id": 1,
        "name": "John Doe",
        "email": "john.doe@example.com",
        "registered_date": _ts(2024, 1, 15),
    },
    {
        "id": 2,
        "name": "Jane Smith",
        "email": "jane.smith@example.com",
        "registered_date": _ts(2024, 3, 20),
    },
]

SEED_ORDERS: list[dict] = [
    {
        "id": 1,
        "customer_id": 1,
        "product_id": 1,  # Premium Widget (catalog)
        "quantity": 2,
        "order_date": _ts(2024, 6, 10),
        "total_amount": Decimal("59.98"),
    },
    {
        "id": 2,
        "customer_id": 2,
        "product_id": 3,  # Basic Tool (catalog)
        "quantity": 1,
        "order_date": _ts(2024, 7, 5),
        "total_amount": Decimal("19.99"),
    },
]


def _register_main_app(registry: SchemaRegistry) -> None:
    registry.add_models(MAIN_APP, Customer, Order)
    registry.add_seed_rows(MAIN_APP, Customer, SEED_CUSTOMERS)
    registry.add_seed_rows(MAIN_APP, Order, SEED_ORDERS)


def build_registry(config) -> SchemaRegistry:
    """
    Collects every package's models and seed rows in dependency order.

    Called once per application by init_database(); the registry is owned by
    the caller and never stored at module level.
    """
    registry = SchemaRegistry()
    catalog.register(registry, config)
    accounts.register(registry, config)
    _register_main_app(registry)
    return registry


# ── Seeding ────────────────────────────────────────────────────────────────

def _primary_key(model: type, row: dict) -> tuple:
    return tuple(row[col.key] for col in inspect(model).primary_key)


def seed_database(registry: SchemaRegistry, session: Session) -> int:
    """
    Inserts every seed row whose primary key is not yet present.

    Returns the number of rows inserted. Flushes only; committing is the
    caller's job.
    """
    inserted = 0
    for seed_set in registry.seed_sets:
        for row in seed_set.rows:
            if session.get(seed_set.model, _primary_key(seed_set.model, row)) is not None:
                continue
            session.add(seed_set.model(**row))
            inserted += 1
        # Flush per model so later sets can reference these rows.
        session.flush()
    return inserted


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores FK constraints unless this pragma is set per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def database_url(app: Flask) -> str:
    """
    The URL the app's engine connects to.

    Flask-SQLAlchemy resolves a relative SQLite path against the instance
    folder, so this can differ from SQLALCHEMY_DATABASE_URI.
    """
    with app.app_context():
        return db.engine.url.render_as_string(hide_password=False)


def init_database(app: Flask, seed: bool = True) -> None:
    """
    Creates all tables on the shared metadata and optionally seeds them.

    Safe to call on every process start.
    """
    with app.app_context():
        engine = db.engine
        if engine.dialect.name == "sqlite" and not event.contains(
                engine, "connect", _enable_sqlite_foreign_keys
        ):
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)

        registry = build_registry(app.config)
        db.create_all()
        app.logger.info(
            "Database ready: packages=%s tables=%d",
            ",".join(registry.packages),
            len(db.metadata.tables),
        )

        if not seed:
            return

        inserted = seed_database(registry, db.session)
        db.session.commit()
        app.logger.info("Seed data applied: %d new rows", inserted)
