"""
services/diagnostics_service.py
-------------------------------
Self-check of a live database: connectivity, schema presence, basic
CRUD through the query builder and transaction commit/rollback.

Each check returns a CheckResult; `run_all` runs them in order.
"""

from dataclasses import dataclass, field

from db.errors import describe_error
from db.init_db import EXPECTED_TABLES
from db.results import QueryResult
from repositories.category_repo import CategoryRepository
from services.errors import SelfCheckError
from utils.logger import get_logger

logger = get_logger(__name__)

TABLE_EXISTS_SQL = """
SELECT EXISTS (
    SELECT 1 FROM information_schema.tables
    WHERE table_schema = 'public' AND table_name = %s
) AS present
"""

CHECK_CATEGORY_NAME = "__diagnostics__"


@dataclass
class CheckResult:
    name: str
    passed: bool
    details: list[str] = field(default_factory=list)


class _ForcedRollback(Exception):
    pass


class DiagnosticsService:
    """Runs the database self-check."""

    def __init__(self, db):
        self.db = db
        self.categories = CategoryRepository(db)

    def check_connection(self) -> CheckResult:
        result = self.db.health_check()
        if result.error:
            return CheckResult("connection", False, [describe_error(result.error)])
        return CheckResult("connection", True, [f"server time {result.data[0]['current_time']}"])

    def check_tables(self) -> CheckResult:
        """Look up every expected table in information_schema."""
        missing, details = [], []
        for table in EXPECTED_TABLES:
            result = self.db.query(TABLE_EXISTS_SQL, (table,))
            if result.error:
                return CheckResult("tables", False, [f"{table}: {describe_error(result.error)}"])
            if not result.data[0]["present"]:
                missing.append(table)
        if missing:
            details.append(f"missing: {', '.join(missing)}")
        else:
            details.append(f"all {len(EXPECTED_TABLES)} tables present")
        return CheckResult("tables", not missing, details)

    def check_crud(self) -> CheckResult:
        """Insert, read, update and delete a throw-away category."""
        details = []
        created = self.categories.add(CHECK_CATEGORY_NAME)
        if created.error:
            return CheckResult("crud", False, [f"insert: {describe_error(created.error)}"])
        category_id = created.data.id
        details.append("insert ok")

        try:
            read = self.categories.get_by_id(category_id)
            if read.error or read.data is None:
                details.append(f"read: {describe_error(read.error) if read.error else 'row not found'}")
                return CheckResult("crud", False, details)
            details.append("read ok")

            renamed = self.categories.rename(category_id, f"{CHECK_CATEGORY_NAME}updated")
            if renamed.error or renamed.data is None:
                details.append(f"update: {describe_error(renamed.error) if renamed.error else 'row not found'}")
                return CheckResult("crud", False, details)
            details.append("update ok")
        finally:
            deleted = self.categories.delete(category_id)
            details.append("delete ok" if deleted.ok else f"delete: {describe_error(deleted.error)}")

        return CheckResult("crud", deleted.ok, details)

    def check_transactions(self) -> CheckResult:
        """A committed insert must be visible; a failed unit must leave nothing behind."""
        details = []

        committed = self.db.transaction(lambda tx: CategoryRepository(tx).add(CHECK_CATEGORY_NAME))
        if committed.error:
            return CheckResult("transactions", False, [f"commit: {describe_error(committed.error)}"])
        committed_id = committed.data.id
        visible = self.categories.get_by_id(committed_id)
        self.categories.delete(committed_id)
        if visible.error or visible.data is None:
            return CheckResult("transactions", False, ["committed row not visible"])
        details.append("commit ok")

        rolled_back_ids = []

        def failing_unit(tx):
            added = CategoryRepository(tx).add(CHECK_CATEGORY_NAME)
            if added.data is not None:
                rolled_back_ids.append(added.data.id)
            raise _ForcedRollback("forced rollback")

        outcome = self.db.transaction(failing_unit)
        if not isinstance(outcome.error, _ForcedRollback):
            details.append(f"rollback: unexpected outcome {outcome.error!r}")
            return CheckResult("transactions", False, details)

        for row_id in rolled_back_ids:
            leftover = self.categories.get_by_id(row_id)
            if leftover.error or leftover.data is not None:
                details.append("rollback: row survived the rollback")
                self.categories.delete(row_id)
                return CheckResult("transactions", False, details)
        details.append("rollback ok")
        return CheckResult("transactions", True, details)

    def run_all(self) -> QueryResult:
        """
        Run every check, stopping after a failed connection check.

        Returns:
            QueryResult whose data is the list of CheckResults, or a
            failure with SelfCheckError carrying them when any check failed.
        """
        results = [self.check_connection()]
        if results[0].passed:
            results += [self.check_tables(), self.check_crud(), self.check_transactions()]

        for check in results:
            level = logger.info if check.passed else logger.error
            level(f"[{'PASS' if check.passed else 'FAIL'}] {check.name}: {'; '.join(check.details)}")

        failed = [c.name for c in results if not c.passed]
        if failed:
            return QueryResult.failure(SelfCheckError(f"Self-check failed: {', '.join(failed)}", results))
        return QueryResult.success(results)
