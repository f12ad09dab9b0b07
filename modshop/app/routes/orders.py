"""
routes/orders.py — Order routes (main app).

Endpoints (url_prefix=/api/v1/orders), no auth:
  GET    /orders        → 200  denormalised with customer/product names
  GET    /orders/:id    → 200
  POST   /orders        → 201  422 INVALID_REFERENCE for unknown customer/product
  PUT    /orders/:id    → 200  partial update; total recomputed on quantity/product change
  DELETE /orders/:id    → 200
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from modshop.app.extensions import db
from modshop.app.schemas.order_schema import CreateOrderSchema, UpdateOrderSchema
from modshop.app.services import order_service

orders_bp = Blueprint("orders", __name__)


@orders_bp.route("/", methods=["GET"])
def list_orders():
    result = order_service.list_orders(session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@orders_bp.route("/<int:order_id>", methods=["GET"])
def get_order(order_id: int):
    result = order_service.get_order(order_id=order_id, session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@orders_bp.route("/", methods=["POST"])
def create_order():
    data = CreateOrderSchema().load(request.get_json(force=True) or {})
    result = order_service.create_order(
        customer_id=data["customer_id"],
        product_id=data["product_id"],
        quantity=data["quantity"],
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 201


@orders_bp.route("/<int:order_id>", methods=["PUT"])
def update_order(order_id: int):
    changes = UpdateOrderSchema().load(request.get_json(force=True) or {})
    result = order_service.update_order(
        order_id=order_id,
        changes=changes,
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 200


@orders_bp.route("/<int:order_id>", methods=["DELETE"])
def delete_order(order_id: int):
    order_service.delete_order(order_id=order_id, session=db.session)
    db.session.commit()
    return jsonify({"data": {"deleted": True, "id": order_id}, "warnings": []}), 200
