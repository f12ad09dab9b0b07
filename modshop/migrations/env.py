"""
modshop/migrations/env.py — Alembic environment.

Builds the Flask app for FLASK_ENV (default "development") and migrates the
database that app's engine points at. A relative SQLite URL such as
sqlite:///app.db therefore resolves into the Flask instance folder, exactly
as it does for the running server.
"""

from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# Tables come from the migrations, never from create_all().
# Must be set before modshop.config is imported.
os.environ["INIT_DATABASE"] = "false"

from modshop.app import create_app  # noqa: E402
from modshop.app.database import database_url  # noqa: E402
from modshop.app.extensions import db  # noqa: E402

target_metadata = db.metadata

# modshop.config has loaded .env by now, so FLASK_ENV may come from there.
db_url = database_url(create_app(os.getenv("FLASK_ENV", "development")))

# ── Alembic config ────────────────────────────────────────────────────────
config = context.config
config.set_main_option("sqlalchemy.url", db_url.replace("%", "%%"))

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def run_migrations_offline() -> None:
    context.configure(
        url=db_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        render_as_batch=db_url.startswith("sqlite"),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            # SQLite cannot ALTER constraints in place.
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
