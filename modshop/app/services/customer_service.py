"""
services/customer_service.py — Customer CRUD (main app).

Delete policy: a customer referenced by any order cannot be deleted
(CUSTOMER_IN_USE, 409).
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from modshop.app.errors import AppError, ErrorCode
from modshop.app.models.customer import Customer
from modshop.app.models.order import Order

_UPDATABLE_FIELDS = ("name", "email")


def get_customer_or_404(customer_id: int, session: Session) -> Customer:
    customer = session.get(Customer, customer_id)
    if customer is None:
        raise AppError(
            ErrorCode.CUSTOMER_NOT_FOUND,
            f"Customer {customer_id} does not exist.",
            404,
        )
    return customer


def build_customer_dict(customer: Customer) -> dict:
    return {
        "id": customer.id,
        "name": customer.name,
        "email": customer.email,
        "registered_date": customer.registered_date.isoformat(),
    }


def list_customers(session: Session) -> list[dict]:
    customers = session.execute(
        select(Customer).order_by(Customer.id.asc())
    ).scalars().all()
    return [build_customer_dict(c) for c in customers]


def get_customer(customer_id: int, session: Session) -> dict:
    return build_customer_dict(get_customer_or_404(customer_id, session))


def create_customer(name: str, email: str, session: Session) -> dict:
    customer = Customer(
        name=name,
        email=email,
        registered_date=datetime.now(timezone.utc),
    )
    session.add(customer)
    session.flush()
    return build_customer_dict(customer)


def update_customer(customer_id: int, changes: dict, session: Session) -> dict:
    """Partial update: only keys present in `changes` are applied."""
    customer = get_customer_or_404(customer_id, session)
    for name in _UPDATABLE_FIELDS:
        if name in changes:
            setattr(customer, name, changes[name])
    session.flush()
    return build_customer_dict(customer)


def delete_customer(customer_id: int, session: Session) -> None:
    """
    Raises:
      AppError(CUSTOMER_NOT_FOUND, 404)
      AppError(CUSTOMER_IN_USE, 409) — orders still reference this customer
    """
    customer = get_customer_or_404(customer_id, session)

    order_count = session.execute(
        select(func.count()).select_from(Order).where(Order.customer_id == customer_id)
    ).scalar_one()
    if order_count:
        raise AppError(
            ErrorCode.CUSTOMER_IN_USE,
            f"Customer {customer_id} has {order_count} order(s) and cannot be deleted.",
            409,
        )

    session.delete(customer)
    session.flush()
