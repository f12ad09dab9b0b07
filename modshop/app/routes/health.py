"""
routes/health.py — Liveness/readiness check.

GET /api/v1/health → 200 {"data": {"status", "components"}} (no auth).
The database component runs a trivial SELECT against the shared engine.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from modshop.app.extensions import db

health_bp = Blueprint("health", __name__)


@health_bp.route("/", methods=["GET"])
def health():
    components = {"app": "ok", "database": "ok"}
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("Health check: database unreachable")
        db.session.rollback()
        components["database"] = "error"

    status = "healthy" if components["database"] == "ok" else "degraded"
    return jsonify({
        "data": {"status": status, "components": components},
        "warnings": [],
    }), 200
