"""Unit tests for TableService."""

from unittest.mock import MagicMock

import pytest

from db.results import CountResult, QueryResult
from models.table import DiningTable
from services.errors import ConflictError, NotFoundError
from services.table_service import TableService


@pytest.fixture
def tables(db):
    service = TableService(db)
    service.tables = MagicMock()
    service.orders = MagicMock()
    return service


class TestGetTable:
    """Single-table lookups."""

    def test_found(self, tables):
        table = DiningTable(name="T1", id="t1")
        tables.tables.get_by_id.return_value = QueryResult.success(table)

        result = tables.get_table("t1")

        assert result.data is table

    def test_missing_table_is_not_found(self, tables):
        tables.tables.get_by_id.return_value = QueryResult.success(None)

        result = tables.get_table("t9")

        assert result.data is None
        assert isinstance(result.error, NotFoundError)

    def test_query_failure_is_passed_through(self, tables):
        error = RuntimeError("db down")
        tables.tables.get_by_id.return_value = QueryResult.failure(error)

        result = tables.get_table("t1")

        assert result.error is error


class TestUpdateTable:
    """Partial updates and status validation."""

    def test_update_rejects_unknown_status(self, tables):
        result = tables.update_table("t1", {"status": "broken"})

        assert isinstance(result.error, ValueError)
        tables.tables.update.assert_not_called()

    def test_update_rejects_unknown_fields(self, tables):
        result = tables.update_table("t1", {"colour": "red"})

        assert isinstance(result.error, ValueError)
        tables.tables.update.assert_not_called()

    def test_update_status(self, tables):
        tables.tables.update.return_value = QueryResult.success(DiningTable(name="T1", status="reserved", id="t1"))

        result = tables.update_table("t1", {"status": "reserved"})

        assert result.data.status == "reserved"
        tables.tables.update.assert_called_once_with("t1", {"status": "reserved"})

    def test_update_missing_table(self, tables):
        tables.tables.update.return_value = QueryResult.success(None)

        result = tables.update_table("t9", {"name": "Patio"})

        assert isinstance(result.error, NotFoundError)


class TestDeleteTable:
    """Tables with orders cannot be deleted."""

    def test_refused_with_orders(self, tables):
        tables.orders.count_by_table.return_value = CountResult(count=4)

        result = tables.delete_table("t1")

        assert isinstance(result.error, ConflictError)
        tables.tables.delete.assert_not_called()

    def test_deleted_when_unused(self, tables):
        tables.orders.count_by_table.return_value = CountResult(count=0)
        tables.tables.delete.return_value = QueryResult.success([{"id": "t1"}])

        result = tables.delete_table("t1")

        assert result.success
        tables.tables.delete.assert_called_once_with("t1")
