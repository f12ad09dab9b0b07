"""
extensions.py — Flask extension singletons.

Initialises SQLAlchemy as a module-level object so it can be imported
anywhere without creating circular dependencies.

Pattern:
    1. Create the extension object here (no app attached yet).
    2. Call init_app(app) inside the app factory in app/__init__.py.
    3. Import `db` from here wherever needed.

    from modshop.app.extensions import db

`db` is the shared data context: every package (catalog, accounts, main app)
declares its models against this one metadata, so a single database holds
all tables and foreign keys can cross package boundaries.

Validation schemas (app/schemas/) are plain marshmallow.Schema classes and
need no extension object or application context.
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
