"""
app/__init__.py — Flask application factory.

Pattern: create_app(config_name) creates and returns a configured Flask app.
         Nothing is initialised at import time — this enables:
           - Multiple isolated test app instances
           - Clean separation between app creation and app startup
           - Alembic to import the metadata without starting the server

Responsibilities:
  1. Load configuration from config_by_name[config_name]
  2. Initialise the SQLAlchemy extension via init_app()
  3. Compose the package schemas and seed the shared database (app/database.py)
  4. Register every route blueprint under /api/v1, explicitly, in one place
  5. Register global error handlers (AppError → JSON, Exception → 500)
  6. Register a custom JSON provider to serialise Decimal as string
"""

from __future__ import annotations

import logging
import traceback
from decimal import Decimal

from flask import Flask, jsonify, request
from flask.json.provider import DefaultJSONProvider
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from modshop.config import config_by_name, validate_production_config


# ── Custom JSON provider ───────────────────────────────────────────────────
# Prices and order totals are serialised as strings to preserve precision.

class DecimalJSONProvider(DefaultJSONProvider):
    """
    Extends Flask's default JSON provider to serialise Decimal as str.

    Example: Decimal("29.99") → "29.99" (not 29.99000000000000198951966012828052043914794921875)
    """

    def default(self, o):
        if isinstance(o, Decimal):
            return str(o)
        return super().default(o)


def _row_id_converter():
    """The default int converter, capped at the largest SQLite row id."""
    from werkzeug.routing import IntegerConverter

    from modshop.app.schemas._validators import MAX_ID

    class RowIdConverter(IntegerConverter):
        def __init__(self, url_map, *args, **kwargs):
            kwargs.setdefault("max", MAX_ID)
            super().__init__(url_map, *args, **kwargs)

    return RowIdConverter


# ── Application factory ────────────────────────────────────────────────────

def create_app(config_name: str = "development") -> Flask:
    """
    Creates and returns a configured Flask application instance.

    Args:
        config_name: One of "development", "testing", "production".
                     Resolved via config_by_name in config.py.

    Returns:
        A fully configured Flask app ready to serve requests.
    """
    app = Flask(__name__)
    app.json_provider_class = DecimalJSONProvider
    app.json = DecimalJSONProvider(app)

    # Accept both /api/v1/products and /api/v1/products/.
    app.url_map.strict_slashes = False

    # An out-of-range id in the path is a 404, never a database overflow.
    app.url_map.converters["int"] = _row_id_converter()

    # ── Configuration ──────────────────────────────────────────────────────
    config_class = config_by_name.get(config_name, config_by_name["development"])
    app.config.from_object(config_class)

    if config_name == "production":
        validate_production_config(app)  # raises ValueError if misconfigured

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    if not app.debug:
        logging.basicConfig(
            level=app.config.get("LOG_LEVEL", "INFO"),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    # ── Extensions ─────────────────────────────────────────────────────────
    # Import here (not at module top) to avoid circular imports.
    from modshop.app.extensions import db
    db.init_app(app)

    # ── Shared schema ──────────────────────────────────────────────────────
    # Importing the database module imports every package's models, which
    # populates db.metadata before create_all() or Alembic inspect it.
    from modshop.app.database import init_database

    if app.config.get("INIT_DATABASE", True):
        init_database(app, seed=app.config.get("SEED_DATABASE", True))

    # ── Blueprints ─────────────────────────────────────────────────────────
    _register_blueprints(app)

    # ── Error handlers ─────────────────────────────────────────────────────
    _register_error_handlers(app)
    _register_cors(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """
    Registers all route blueprints under the /api/v1 prefix.

    Every package's routes are listed here explicitly; nothing is discovered
    at runtime.
    """
    from modshop.app.routes.auth import auth_bp
    from modshop.app.routes.customers import customers_bp
    from modshop.app.routes.health import health_bp
    from modshop.app.routes.orders import orders_bp
    from modshop.app.routes.products import products_bp
    from modshop.app.routes.user_groups import user_groups_bp
    from modshop.app.routes.users import users_bp

    # catalog package
    app.register_blueprint(products_bp,    url_prefix="/api/v1/products")
    # accounts package
    app.register_blueprint(auth_bp,        url_prefix="/api/v1/auth")
    app.register_blueprint(users_bp,       url_prefix="/api/v1/users")
    app.register_blueprint(user_groups_bp, url_prefix="/api/v1/usergroups")
    # main app
    app.register_blueprint(customers_bp,   url_prefix="/api/v1/customers")
    app.register_blueprint(orders_bp,      url_prefix="/api/v1/orders")
    app.register_blueprint(health_bp,      url_prefix="/api/v1/health")


def _register_error_handlers(app: Flask) -> None:
    """
    Registers global error handlers.

    Handlers:
      AppError        → structured JSON error envelope with the correct HTTP status
      ValidationError → marshmallow schema errors formatted as MISSING_FIELD /
                        INVALID_FIELD responses (400)
      HTTPException   → routing/parsing errors (404, 405, malformed JSON) in the
                        same envelope
      Exception       → generic INTERNAL_ERROR (500); full traceback logged

    Stack traces never leave the server.
    """
    from modshop.app.errors import AppError, ErrorCode

    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        """
        Converts an AppError raised anywhere in the request lifecycle
        (middleware, service, route) into the standard error envelope.

        Routes never catch AppError — they let it propagate here.
        """
        from modshop.app.extensions import db

        # Discard anything a service flushed before it raised.
        db.session.rollback()
        return jsonify(error.to_dict()), error.http_status

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        """
        Converts marshmallow ValidationError into the standard error envelope.

        Only the FIRST field error is returned.
        If the message is already one of our registered codes it is used as
        the code; otherwise MISSING_FIELD / INVALID_FIELD.
        """
        messages = error.messages  # e.g. {"price": ["INVALID_PRICE_PRECISION"]}

        field = None
        raw_message = "Invalid input."
        code = ErrorCode.INVALID_FIELD

        if isinstance(messages, dict):
            for field_name, field_errors in messages.items():
                field = field_name if field_name != "_schema" else None

                if isinstance(field_errors, list):
                    raw_message = field_errors[0] if field_errors else "Invalid value."
                else:
                    raw_message = str(field_errors)

                if raw_message in vars(ErrorCode).values():
                    code = raw_message
                elif str(raw_message).startswith("Missing data for required field"):
                    code = ErrorCode.MISSING_FIELD
                else:
                    code = ErrorCode.INVALID_FIELD
                break
        elif isinstance(messages, list):
            raw_message = messages[0] if messages else "Invalid input."
            if raw_message in vars(ErrorCode).values():
                code = raw_message
            elif str(raw_message).startswith("Missing data for required field"):
                code = ErrorCode.MISSING_FIELD

        response_body = {
            "error": {
                "code": code,
                "message": raw_message if raw_message not in vars(ErrorCode).values()
                else _code_to_message(code),
            }
        }
        if field is not None:
            response_body["error"]["field"] = field

        return jsonify(response_body), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        """Framework-level errors (unknown route, wrong method, bad JSON body)."""
        if error.code == 404:
            code = ErrorCode.NOT_FOUND
        elif error.code == 405:
            code = ErrorCode.METHOD_NOT_ALLOWED
        elif error.code is not None and error.code < 500:
            code = ErrorCode.INVALID_FIELD
        else:
            code = ErrorCode.INTERNAL_ERROR
        return jsonify({
            "error": {
                "code": code,
                "message": error.description or error.name,
            }
        }), error.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        """
        Catches all unhandled exceptions and returns a generic 500 response.

        The full traceback is logged to the application logger. A failed
        request never takes the process down.
        """
        from modshop.app.extensions import db

        db.session.rollback()
        app.logger.error(
            "Unhandled exception on %s %s: %s\n%s",
            request.method,
            request.path,
            str(error),
            traceback.format_exc(),
        )
        return jsonify({
            "error": {
                "code": ErrorCode.INTERNAL_ERROR,
                "message": "An unexpected error occurred. Please try again later.",
            }
        }), 500


def _register_cors(app: Flask) -> None:
    """
    Adds CORS headers for browser-based local development.

    Enabled when DEBUG or TESTING is true so a frontend served from another
    local port can call the API with Authorization headers.
    """

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allow_all = bool(app.config.get("DEBUG") or app.config.get("TESTING"))

        if allow_all:
            response.headers["Access-Control-Allow-Origin"] = origin if origin else "*"
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"

        return response


def _code_to_message(code: str) -> str:
    """
    Returns a human-readable default message for a known error code.
    Used when a ValidationError message IS the error code constant itself.
    """
    _messages = {
        "INVALID_PRICE_PRECISION": "Price must have at most 2 decimal places.",
    }
    return _messages.get(code, "Invalid input.")
