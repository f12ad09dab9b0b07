"""
services/product_service.py — Catalog product CRUD.

Delete policy: a product referenced by any order cannot be deleted
(PRODUCT_IN_USE, 409). Price changes never touch existing orders; their
total_amount was fixed when they were written.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from modshop.app.errors import AppError, ErrorCode
from modshop.app.models.order import Order
from modshop.app.models.product import Product

_UPDATABLE_FIELDS = ("name", "description", "price", "category")


def get_product_or_404(product_id: int, session: Session) -> Product:
    product = session.get(Product, product_id)
    if product is None:
        raise AppError(
            ErrorCode.PRODUCT_NOT_FOUND,
            f"Product {product_id} does not exist.",
            404,
        )
    return product


def build_product_dict(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": Decimal(product.price).quantize(Decimal("0.01")),
        "category": product.category,
    }


def list_products(session: Session) -> list[dict]:
    products = session.execute(
        select(Product).order_by(Product.id.asc())
    ).scalars().all()
    return [build_product_dict(p) for p in products]


def get_product(product_id: int, session: Session) -> dict:
    return build_product_dict(get_product_or_404(product_id, session))


def create_product(
        name: str,
        price,
        session: Session,
        description: str = "",
        category: str = "",
) -> dict:
    product = Product(
        name=name,
        description=description,
        price=price,
        category=category,
    )
    session.add(product)
    session.flush()
    return build_product_dict(product)


def update_product(product_id: int, changes: dict, session: Session) -> dict:
    """Partial update: only keys present in `changes` are applied."""
    product = get_product_or_404(product_id, session)
    for name in _UPDATABLE_FIELDS:
        if name in changes:
            setattr(product, name, changes[name])
    session.flush()
    return build_product_dict(product)


def delete_product(product_id: int, session: Session) -> None:
    """
    Raises:
      AppError(PRODUCT_NOT_FOUND, 404)
      AppError(PRODUCT_IN_USE, 409) — orders still reference this product
    """
    product = get_product_or_404(product_id, session)

    order_count = session.execute(
        select(func.count()).select_from(Order).where(Order.product_id == product_id)
    ).scalar_one()
    if order_count:
        raise AppError(
            ErrorCode.PRODUCT_IN_USE,
            f"Product {product_id} is referenced by {order_count} order(s) and cannot be deleted.",
            409,
        )

    session.delete(product)
    session.flush()
