"""Unit tests for the database self-check."""

from unittest.mock import patch

import pytest
from psycopg2 import errors

from db.init_db import EXPECTED_TABLES
from db.results import QueryResult
from models.menu import Category
from services.diagnostics_service import CheckResult, DiagnosticsService
from services.errors import SelfCheckError


@pytest.fixture
def categories():
    with patch("services.diagnostics_service.CategoryRepository") as repo_cls:
        yield repo_cls.return_value


def healthy(db):
    db.health_check.return_value = QueryResult.success([{"current_time": "2026-10-19 12:00:00"}])
    db.query.side_effect = lambda sql, params: QueryResult.success([{"present": True}])


def stored_only(*ids):
    """get_by_id stand-in that finds a category only for the given ids."""
    return lambda category_id: QueryResult.success(
        Category(name="__diagnostics__", id=category_id) if category_id in ids else None
    )


class TestCheckTables:
    def test_reports_missing_tables(self, db, categories):
        db.query.side_effect = lambda sql, params: QueryResult.success([{"present": params[0] != "orders"}])

        check = DiagnosticsService(db).check_tables()

        assert not check.passed
        assert check.details == ["missing: orders"]

    def test_all_present(self, db, categories):
        healthy(db)

        check = DiagnosticsService(db).check_tables()

        assert check.passed
        assert db.query.call_count == len(EXPECTED_TABLES)


class TestCheckCrud:
    """Insert, read, rename and delete of a scratch category."""

    def test_full_cycle(self, db, categories):
        categories.add.return_value = QueryResult.success(Category(name="__diagnostics__", id="c1"))
        categories.get_by_id.side_effect = stored_only("c1")
        categories.rename.return_value = QueryResult.success(Category(name="__diagnostics__updated", id="c1"))
        categories.delete.return_value = QueryResult.success([{"id": "c1"}])

        check = DiagnosticsService(db).check_crud()

        assert check.passed
        assert check.details == ["insert ok", "read ok", "update ok", "delete ok"]
        categories.delete.assert_called_once_with("c1")

    def test_row_is_deleted_even_when_read_fails(self, db, categories):
        categories.add.return_value = QueryResult.success(Category(name="__diagnostics__", id="c1"))
        categories.get_by_id.return_value = QueryResult.success(None)
        categories.delete.return_value = QueryResult.success([{"id": "c1"}])

        check = DiagnosticsService(db).check_crud()

        assert not check.passed
        assert "read: row not found" in check.details
        categories.rename.assert_not_called()
        categories.delete.assert_called_once_with("c1")

    def test_insert_failure(self, db, categories):
        categories.add.return_value = QueryResult.failure(errors.lookup("42501")("permission denied"))

        check = DiagnosticsService(db).check_crud()

        assert not check.passed
        categories.delete.assert_not_called()


class TestCheckTransactions:
    """Commit visibility and rollback cleanliness."""

    def test_commit_visible_and_rollback_clean(self, db, categories):
        categories.add.side_effect = [
            QueryResult.success(Category(name="__diagnostics__", id="committed")),
            QueryResult.success(Category(name="__diagnostics__", id="rolled-back")),
        ]
        categories.get_by_id.side_effect = stored_only("committed")

        check = DiagnosticsService(db).check_transactions()

        assert check.passed
        assert check.details == ["commit ok", "rollback ok"]
        assert db.transaction.call_count == 2
        categories.delete.assert_called_once_with("committed")

    def test_surviving_row_fails_the_check(self, db, categories):
        categories.add.side_effect = [
            QueryResult.success(Category(name="__diagnostics__", id="committed")),
            QueryResult.success(Category(name="__diagnostics__", id="rolled-back")),
        ]
        categories.get_by_id.side_effect = stored_only("committed", "rolled-back")

        check = DiagnosticsService(db).check_transactions()

        assert not check.passed
        assert "rollback: row survived the rollback" in check.details
        categories.delete.assert_any_call("rolled-back")

    def test_committed_row_missing(self, db, categories):
        categories.add.return_value = QueryResult.success(Category(name="__diagnostics__", id="committed"))
        categories.get_by_id.side_effect = stored_only()

        check = DiagnosticsService(db).check_transactions()

        assert not check.passed
        assert check.details == ["committed row not visible"]


class TestRunAll:
    """The report is either all results or a SelfCheckError carrying them."""

    def test_all_checks_pass(self, db, categories):
        healthy(db)
        ids = iter(["crud", "committed", "rolled-back"])
        categories.add.side_effect = lambda name: QueryResult.success(Category(name=name, id=next(ids)))
        categories.get_by_id.side_effect = stored_only("crud", "committed")
        categories.rename.return_value = QueryResult.success(Category(name="__diagnostics__updated", id="c1"))
        categories.delete.return_value = QueryResult.success([{"id": "c1"}])

        result = DiagnosticsService(db).run_all()

        assert result.error is None
        assert [check.name for check in result.data] == ["connection", "tables", "crud", "transactions"]

    def test_stops_after_connection_failure(self, db, categories):
        db.health_check.return_value = QueryResult.failure(errors.lookup("08006")("connection failure"))

        result = DiagnosticsService(db).run_all()

        assert result.data is None
        assert isinstance(result.error, SelfCheckError)
        assert [check.name for check in result.error.results] == ["connection"]
        db.query.assert_not_called()

    def test_failed_check_never_returns_data(self, db, categories):
        healthy(db)
        categories.add.return_value = QueryResult.failure(RuntimeError("insert refused"))

        result = DiagnosticsService(db).run_all()

        assert result.data is None
        assert isinstance(result.error, SelfCheckError)
        assert all(isinstance(check, CheckResult) for check in result.error.results)
        failed = [check.name for check in result.error.results if not check.passed]
        assert failed == ["crud", "transactions"]
