"""
services/order_service.py — Order business logic (main app).

Invariants enforced here:
  - An order references an existing customer and an existing product.
    A missing one is INVALID_REFERENCE (422) and nothing is written.
  - total_amount = product.price × quantity, computed from the product's
    price at the moment the order is created or its quantity/product changes.
    Later product price changes never alter an existing order.

Layer rules:
  - No Flask imports. Commits are the route's responsibility — only flush here.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from modshop.app.errors import AppError, ErrorCode
from modshop.app.models.customer import Customer
from modshop.app.models.order import Order
from modshop.app.models.product import Product

# Largest value the NUMERIC(12, 2) total_amount column holds.
MAX_TOTAL = Decimal("9999999999.99")


# ── Private helpers ────────────────────────────────────────────────────────

def _get_order_or_404(order_id: int, session: Session) -> Order:
    order = session.get(Order, order_id)
    if order is None:
        raise AppError(
            ErrorCode.ORDER_NOT_FOUND,
            f"Order {order_id} does not exist.",
            404,
        )
    return order


def _require_customer(customer_id: int, session: Session) -> Customer:
    customer = session.get(Customer, customer_id)
    if customer is None:
        raise AppError(
            ErrorCode.INVALID_REFERENCE,
            f"Customer {customer_id} does not exist.",
            422,
            field="customer_id",
        )
    return customer


def _require_product(product_id: int, session: Session) -> Product:
    product = session.get(Product, product_id)
    if product is None:
        raise AppError(
            ErrorCode.INVALID_REFERENCE,
            f"Product {product_id} does not exist.",
            422,
            field="product_id",
        )
    return product


def compute_total(price: Decimal, quantity: int) -> Decimal:
    """price × quantity, kept at 2 decimal places."""
    return (Decimal(price) * quantity).quantize(Decimal("0.01"))


def _checked_total(price: Decimal, quantity: int) -> Decimal:
    total = compute_total(price, quantity)
    if total > MAX_TOTAL:
        raise AppError(
            ErrorCode.INVALID_FIELD,
            f"Order total must not exceed {MAX_TOTAL}; reduce the quantity.",
            400,
            field="quantity",
        )
    return total


def _build_order_dict(order: Order) -> dict:
    """Denormalised transfer object: includes customer and product names."""
    return {
        "id": order.id,
        "customer_id": order.customer_id,
        "customer_name": order.customer.name,
        "product_id": order.product_id,
        "product_name": order.product.name,
        "quantity": order.quantity,
        "order_date": order.order_date.isoformat(),
        "total_amount": order.total_amount,
    }


# ── Public service functions ───────────────────────────────────────────────

def list_orders(session: Session) -> list[dict]:
    stmt = (
        select(Order)
        .options(joinedload(Order.customer), joinedload(Order.product))
        .order_by(Order.id.asc())
    )
    return [_build_order_dict(o) for o in session.execute(stmt).scalars().all()]


def get_order(order_id: int, session: Session) -> dict:
    return _build_order_dict(_get_order_or_404(order_id, session))


def create_order(
        customer_id: int,
        product_id: int,
        quantity: int,
        session: Session,
) -> dict:
    """
    Raises:
      AppError(INVALID_REFERENCE, 422) — customer or product missing
      AppError(INVALID_FIELD, 400) — total would exceed MAX_TOTAL
    """
    customer = _require_customer(customer_id, session)
    product = _require_product(product_id, session)

    order = Order(
        customer=customer,
        product=product,
        quantity=quantity,
        order_date=datetime.now(timezone.utc),
        total_amount=_checked_total(product.price, quantity),
    )
    session.add(order)
    session.flush()
    return _build_order_dict(order)


def update_order(order_id: int, changes: dict, session: Session) -> dict:
    """
    Partial update of customer_id, product_id and/or quantity.

    total_amount is recomputed from the current price of the order's
    (possibly new) product whenever quantity or product_id is supplied;
    a customer-only change leaves it untouched.

    Raises:
      AppError(ORDER_NOT_FOUND, 404)
      AppError(INVALID_REFERENCE, 422)
      AppError(INVALID_FIELD, 400) — total would exceed MAX_TOTAL
    """
    order = _get_order_or_404(order_id, session)

    if "customer_id" in changes:
        order.customer = _require_customer(changes["customer_id"], session)

    if "product_id" in changes:
        order.product = _require_product(changes["product_id"], session)

    if "quantity" in changes:
        order.quantity = changes["quantity"]

    if "quantity" in changes or "product_id" in changes:
        order.total_amount = _checked_total(order.product.price, order.quantity)

    session.flush()
    return _build_order_dict(order)


def delete_order(order_id: int, session: Session) -> None:
    order = _get_order_or_404(order_id, session)
    session.delete(order)
    session.flush()
