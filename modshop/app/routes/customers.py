"""
routes/customers.py — Customer routes (main app).

Endpoints (url_prefix=/api/v1/customers), no auth:
  GET    /customers        → 200
  GET    /customers/:id    → 200
  POST   /customers        → 201
  PUT    /customers/:id    → 200  partial update
  DELETE /customers/:id    → 200  409 CUSTOMER_IN_USE if it has orders
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from modshop.app.extensions import db
from modshop.app.schemas.customer_schema import CreateCustomerSchema, UpdateCustomerSchema
from modshop.app.services import customer_service

customers_bp = Blueprint("customers", __name__)


@customers_bp.route("/", methods=["GET"])
def list_customers():
    result = customer_service.list_customers(session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@customers_bp.route("/<int:customer_id>", methods=["GET"])
def get_customer(customer_id: int):
    result = customer_service.get_customer(customer_id=customer_id, session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@customers_bp.route("/", methods=["POST"])
def create_customer():
    data = CreateCustomerSchema().load(request.get_json(force=True) or {})
    result = customer_service.create_customer(
        name=data["name"],
        email=data["email"],
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 201


@customers_bp.route("/<int:customer_id>", methods=["PUT"])
def update_customer(customer_id: int):
    changes = UpdateCustomerSchema().load(request.get_json(force=True) or {})
    result = customer_service.update_customer(
        customer_id=customer_id,
        changes=changes,
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 200


@customers_bp.route("/<int:customer_id>", methods=["DELETE"])
def delete_customer(customer_id: int):
    customer_service.delete_customer(customer_id=customer_id, session=db.session)
    db.session.commit()
    return jsonify({"data": {"deleted": True, "id": customer_id}, "warnings": []}), 200
