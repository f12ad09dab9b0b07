"""
routes/users.py — User administration.

Endpoints (url_prefix=/api/v1/users):
  GET    /users          → 200  any authenticated caller
  GET    /users/:id      → 200  any authenticated caller
  POST   /users          → 201  Administrators
  PUT    /users/:id      → 200  Administrators or Managers
  DELETE /users/:id      → 200  Administrators
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from modshop.app.extensions import db
from modshop.app.middleware.auth_middleware import require_auth, require_groups
from modshop.app.packages.accounts import ADMINISTRATORS, MANAGERS
from modshop.app.schemas.user_schema import CreateUserSchema, UpdateUserSchema
from modshop.app.services import user_service

users_bp = Blueprint("users", __name__)


@users_bp.route("/", methods=["GET"])
@require_auth
def list_users():
    result = user_service.list_users(session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@users_bp.route("/<int:user_id>", methods=["GET"])
@require_auth
def get_user(user_id: int):
    result = user_service.get_user(user_id=user_id, session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@users_bp.route("/", methods=["POST"])
@require_groups(ADMINISTRATORS)
def create_user():
    data = CreateUserSchema().load(request.get_json(force=True) or {})
    result = user_service.create_user(
        username=data["username"],
        email=data["email"],
        password=data["password"],
        first_name=data["first_name"],
        last_name=data["last_name"],
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 201


@users_bp.route("/<int:user_id>", methods=["PUT"])
@require_groups(ADMINISTRATORS, MANAGERS)
def update_user(user_id: int):
    """PUT /users/:id — partial update; absent fields keep their value."""
    changes = UpdateUserSchema().load(request.get_json(force=True) or {})
    result = user_service.update_user(
        user_id=user_id,
        changes=changes,
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 200


@users_bp.route("/<int:user_id>", methods=["DELETE"])
@require_groups(ADMINISTRATORS)
def delete_user(user_id: int):
    user_service.delete_user(user_id=user_id, session=db.session)
    db.session.commit()
    return jsonify({"data": {"deleted": True, "id": user_id}, "warnings": []}), 200
