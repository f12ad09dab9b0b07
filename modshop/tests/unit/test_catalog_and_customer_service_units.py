"""
Unit tests for product_service and customer_service delete/update branches.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from modshop.app.errors import AppError, ErrorCode
from modshop.app.services import customer_service, product_service


def _product():
    return SimpleNamespace(
        id=1,
        name="Premium Widget",
        description="High-quality widget from package",
        price=Decimal("29.99"),
        category="Widgets",
    )


def test_update_product_applies_only_supplied_fields():
    product = _product()
    session = MagicMock()
    session.get.return_value = product

    result = product_service.update_product(
        product_id=1, changes={"price": Decimal("31.50")}, session=session,
    )

    assert result["price"] == Decimal("31.50")
    assert result["name"] == "Premium Widget"
    assert result["category"] == "Widgets"


def test_delete_product_in_use_raises_conflict():
    session = MagicMock()
    session.get.return_value = _product()
    session.execute.return_value.scalar_one.return_value = 2

    with pytest.raises(AppError) as exc_info:
        product_service.delete_product(product_id=1, session=session)

    assert exc_info.value.code == ErrorCode.PRODUCT_IN_USE
    assert exc_info.value.http_status == 409
    session.delete.assert_not_called()


def test_delete_unused_product():
    product = _product()
    session = MagicMock()
    session.get.return_value = product
    session.execute.return_value.scalar_one.return_value = 0

    product_service.delete_product(product_id=1, session=session)

    session.delete.assert_called_once_with(product)


def test_get_missing_product_raises_not_found():
    session = MagicMock()
    session.get.return_value = None

    with pytest.raises(AppError) as exc_info:
        product_service.get_product(product_id=9, session=session)

    assert exc_info.value.code == ErrorCode.PRODUCT_NOT_FOUND


def test_delete_customer_in_use_raises_conflict():
    session = MagicMock()
    session.get.return_value = SimpleNamespace(id=1)
    session.execute.return_value.scalar_one.return_value = 1

    with pytest.raises(AppError) as exc_info:
        customer_service.delete_customer(customer_id=1, session=session)

    assert exc_info.value.code == ErrorCode.CUSTOMER_IN_USE
    session.delete.assert_not_called()


def test_update_customer_keeps_registered_date():
    registered = datetime(2024, 1, 15, tzinfo=timezone.utc)
    customer = SimpleNamespace(
        id=1, name="John Doe", email="john.doe@example.com", registered_date=registered,
    )
    session = MagicMock()
    session.get.return_value = customer

    result = customer_service.update_customer(
        customer_id=1, changes={"email": "john@example.org"}, session=session,
    )

    assert result == {
        "id": 1,
        "name": "John Doe",
        "email": "john@example.org",
        "registered_date": registered.isoformat(),
    }
