"""
routes/user_groups.py — User group and membership route handlers.

Layer rules:
  - Parse, validate, call ONE service, commit, return envelope.
  - No business logic. No DB queries. No bare SQL.

Endpoints (url_prefix=/api/v1/usergroups):
  GET    /usergroups                      → 200  public
  GET    /usergroups/:id                  → 200  public
  GET    /usergroups/:id/users            → 200  public
  POST   /usergroups                      → 201  Administrators
  PUT    /usergroups/:id                  → 200  Administrators
  DELETE /usergroups/:id                  → 200  Administrators
  POST   /usergroups/:id/users            → 201  Administrators
  DELETE /usergroups/:id/users/:uid       → 200  Administrators
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from modshop.app.extensions import db
from modshop.app.middleware.auth_middleware import require_groups
from modshop.app.packages.accounts import ADMINISTRATORS
from modshop.app.schemas.user_group_schema import (
    AddUserToGroupSchema,
    CreateUserGroupSchema,
    UpdateUserGroupSchema,
)
from modshop.app.services import user_group_service

user_groups_bp = Blueprint("user_groups", __name__)


@user_groups_bp.route("/", methods=["GET"])
def list_groups():
    result = user_group_service.list_groups(session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@user_groups_bp.route("/<int:group_id>", methods=["GET"])
def get_group(group_id: int):
    result = user_group_service.get_group(group_id=group_id, session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@user_groups_bp.route("/<int:group_id>/users", methods=["GET"])
def list_members(group_id: int):
    result = user_group_service.list_members(group_id=group_id, session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@user_groups_bp.route("/", methods=["POST"])
@require_groups(ADMINISTRATORS)
def create_group():
    data = CreateUserGroupSchema().load(request.get_json(force=True) or {})
    result = user_group_service.create_group(
        name=data["name"],
        description=data["description"],
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 201


@user_groups_bp.route("/<int:group_id>", methods=["PUT"])
@require_groups(ADMINISTRATORS)
def update_group(group_id: int):
    changes = UpdateUserGroupSchema().load(request.get_json(force=True) or {})
    result = user_group_service.update_group(
        group_id=group_id,
        changes=changes,
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 200


@user_groups_bp.route("/<int:group_id>", methods=["DELETE"])
@require_groups(ADMINISTRATORS)
def delete_group(group_id: int):
    user_group_service.delete_group(group_id=group_id, session=db.session)
    db.session.commit()
    return jsonify({"data": {"deleted": True, "id": group_id}, "warnings": []}), 200


@user_groups_bp.route("/<int:group_id>/users", methods=["POST"])
@require_groups(ADMINISTRATORS)
def add_member(group_id: int):
    """POST /usergroups/:id/users — Add a user to the group."""
    data = AddUserToGroupSchema().load(request.get_json(force=True) or {})
    result = user_group_service.add_member(
        group_id=group_id,
        user_id=data["user_id"],
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 201


@user_groups_bp.route("/<int:group_id>/users/<int:user_id>", methods=["DELETE"])
@require_groups(ADMINISTRATORS)
def remove_member(group_id: int, user_id: int):
    """DELETE /usergroups/:id/users/:uid — Remove a user from the group."""
    user_group_service.remove_member(
        group_id=group_id,
        user_id=user_id,
        session=db.session,
    )
    db.session.commit()
    return jsonify({
        "data": {
            "removed": True,
            "group_id": group_id,
            "user_id": user_id,
        },
        "warnings": [],
    }), 200
