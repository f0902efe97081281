"""Unit tests for the SQL OrderRepository sends to the executor."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from db.query_builder import QueryBuilder
from db.results import QueryResult
from models.order import Order
from repositories.order_repo import OrderRepository

OPENED_AT = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def executor():
    mock = MagicMock(name="executor")
    mock.from_.side_effect = lambda table: QueryBuilder(table, executor=mock)
    return mock


class TestCashReceivedSince:
    """Cash taken for the drawer is keyed on when the order was paid."""

    def test_filters_on_payment_time(self, executor):
        executor.run.return_value = QueryResult.success([{"amount_paid": "42.50"}])

        result = OrderRepository(executor).cash_received_since(OPENED_AT)

        compiled = executor.run.call_args[0][0]
        assert "paid_at >= %s" in compiled.sql
        assert "order_time" not in compiled.sql
        assert compiled.params == ("paid", "cash", OPENED_AT)
        assert result.data == [42.5]

    def test_order_placed_before_opening_counts_when_paid_after(self, executor):
        """An order placed yesterday and paid after opening belongs to this session."""
        placed = datetime(2026, 2, 28, 22, 30, tzinfo=timezone.utc)
        paid = datetime(2026, 3, 1, 9, 15, tzinfo=timezone.utc)
        rows = [{"amount_paid": 30.0, "order_time": placed, "paid_at": paid}]
        executor.run.side_effect = lambda compiled: QueryResult.success(
            [r for r in rows if r["paid_at"] >= compiled.params[-1]]
        )

        result = OrderRepository(executor).cash_received_since(OPENED_AT)

        assert result.data == [30.0]

    def test_null_amount_counts_as_zero(self, executor):
        executor.run.return_value = QueryResult.success([{"amount_paid": None}])

        result = OrderRepository(executor).cash_received_since(OPENED_AT)

        assert result.data == [0.0]


class TestAddOrder:
    def test_payment_time_is_stored(self, executor):
        paid = datetime(2026, 3, 1, 9, 15, tzinfo=timezone.utc)
        executor.run.side_effect = lambda compiled: QueryResult.success([])

        OrderRepository(executor).add(Order(
            customer_name="Ana", status="delivered", total_amount=30.0, payment_status="paid",
            order_type="pickup", payment_method="cash", amount_paid=30.0, paid_at=paid,
        ))

        compiled = executor.run.call_args[0][0]
        assert compiled.sql.startswith("INSERT INTO orders")
        assert "paid_at" in compiled.sql
        assert paid in compiled.params
