"""
routes/products.py — Catalog package routes.

Endpoints (url_prefix=/api/v1/products), no auth:
  GET    /products        → 200
  GET    /products/:id    → 200
  POST   /products        → 201
  PUT    /products/:id    → 200  partial update
  DELETE /products/:id    → 200  409 PRODUCT_IN_USE if ordered
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from modshop.app.extensions import db
from modshop.app.schemas.product_schema import CreateProductSchema, UpdateProductSchema
from modshop.app.services import product_service

products_bp = Blueprint("products", __name__)


@products_bp.route("/", methods=["GET"])
def list_products():
    result = product_service.list_products(session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@products_bp.route("/<int:product_id>", methods=["GET"])
def get_product(product_id: int):
    result = product_service.get_product(product_id=product_id, session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@products_bp.route("/", methods=["POST"])
def create_product():
    data = CreateProductSchema().load(request.get_json(force=True) or {})
    result = product_service.create_product(
        name=data["name"],
        description=data["description"],
        price=data["price"],
        category=data["category"],
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 201


@products_bp.route("/<int:product_id>", methods=["PUT"])
def update_product(product_id: int):
    changes = UpdateProductSchema().load(request.get_json(force=True) or {})
    result = product_service.update_product(
        product_id=product_id,
        changes=changes,
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 200


@products_bp.route("/<int:product_id>", methods=["DELETE"])
def delete_product(product_id: int):
    product_service.delete_product(product_id=product_id, session=db.session)
    db.session.commit()
    return jsonify({"data": {"deleted": True, "id": product_id}, "warnings": []}), 200
