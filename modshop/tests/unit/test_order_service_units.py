"""
Unit tests for order_service: total computation and reference checks.

These tests run DB-free with mocked sessions.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from modshop.app.errors import AppError, ErrorCode
from modshop.app.services import order_service


def _order(**overrides):
    values = dict(
        id=1,
        customer_id=1,
        customer=SimpleNamespace(name="John Doe"),
        product_id=1,
        product=SimpleNamespace(name="Premium Widget", price=Decimal("29.99")),
        quantity=2,
        order_date=datetime(2024, 6, 10, tzinfo=timezone.utc),
        total_amount=Decimal("59.98"),
    )
    values.update(overrides)
    return SimpleNamespace(**values)


class TestComputeTotal:

    def test_price_times_quantity(self):
        assert order_service.compute_total(Decimal("29.99"), 2) == Decimal("59.98")

    def test_result_has_two_decimal_places(self):
        total = order_service.compute_total(Decimal("10"), 3)
        assert total == Decimal("30.00")
        assert total.as_tuple().exponent == -2

    def test_zero_price(self):
        assert order_service.compute_total(Decimal("0.00"), 5) == Decimal("0.00")


class TestTotalLimit:

    def test_create_rejects_total_above_column_limit(self):
        product = SimpleNamespace(id=1, name="Yacht", price=Decimal("99999999.99"))
        session = MagicMock()
        session.get.side_effect = [SimpleNamespace(id=1, name="John Doe"), product]

        with pytest.raises(AppError) as exc_info:
            order_service.create_order(
                customer_id=1, product_id=1, quantity=101, session=session,
            )

        assert exc_info.value.field == "quantity"
        session.add.assert_not_called()

    def test_max_total_matches_numeric_12_2(self):
        assert order_service.MAX_TOTAL == Decimal("9999999999.99")


class TestReferenceChecks:

    def test_missing_customer_raises_invalid_reference(self):
        session = MagicMock()
        session.get.return_value = None

        with pytest.raises(AppError) as exc_info:
            order_service.create_order(
                customer_id=999, product_id=1, quantity=1, session=session,
            )

        err = exc_info.value
        assert err.code == ErrorCode.INVALID_REFERENCE
        assert err.http_status == 422
        assert err.field == "customer_id"
        session.add.assert_not_called()

    def test_missing_product_raises_invalid_reference(self):
        session = MagicMock()
        session.get.side_effect = [SimpleNamespace(id=1, name="John Doe"), None]

        with pytest.raises(AppError) as exc_info:
            order_service.create_order(
                customer_id=1, product_id=999, quantity=1, session=session,
            )

        assert exc_info.value.field == "product_id"
        session.add.assert_not_called()

    def test_get_order_raises_not_found(self):
        session = MagicMock()
        session.get.return_value = None

        with pytest.raises(AppError) as exc_info:
            order_service.get_order(order_id=5, session=session)

        assert exc_info.value.code == ErrorCode.ORDER_NOT_FOUND
        assert exc_info.value.http_status == 404


class TestUpdateOrder:

    def test_quantity_change_recomputes_from_current_price(self):
        order = _order()
        order.product.price = Decimal("10.00")
        session = MagicMock()
        session.get.return_value = order

        result = order_service.update_order(order_id=1, changes={"quantity": 4}, session=session)

        assert result["quantity"] == 4
        assert result["total_amount"] == Decimal("40.00")
        session.flush.assert_called_once()

    def test_customer_change_keeps_total(self):
        order = _order()
        new_customer = SimpleNamespace(name="Jane Smith")
        session = MagicMock()
        session.get.side_effect = [order, new_customer]

        result = order_service.update_order(order_id=1, changes={"customer_id": 2}, session=session)

        assert order.customer is new_customer
        assert result["total_amount"] == Decimal("59.98")

    def test_total_above_limit_raises_invalid_field(self):
        order = _order()
        order.product.price = Decimal("99999999.99")
        session = MagicMock()
        session.get.return_value = order

        with pytest.raises(AppError) as exc_info:
            order_service.update_order(order_id=1, changes={"quantity": 101}, session=session)

        assert exc_info.value.code == ErrorCode.INVALID_FIELD
        assert exc_info.value.http_status == 400
        assert exc_info.value.field == "quantity"
        session.flush.assert_not_called()

    def test_order_dict_is_denormalised(self):
        session = MagicMock()
        session.get.return_value = _order()

        result = order_service.get_order(order_id=1, session=session)

        assert result == {
            "id": 1,
            "customer_id": 1,
            "customer_name": "John Doe",
            "product_id": 1,
            "product_name": "Premium Widget",
            "quantity": 2,
            "order_date": "2024-06-10T00:00:00+00:00",
            "total_amount": Decimal("59.98"),
        }
