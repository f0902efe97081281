"""
repositories/table_repo.py
---------------------------
Data access layer for dining tables.
"""

from db.results import QueryResult
from models.table import DiningTable, TableStatus
from utils.helpers import from_row, new_id, utc_now


class TableRepository:
    """Repository for CRUD operations on the tables table."""

    def __init__(self, executor):
        self.executor = executor

    def _table(self):
        return self.executor.from_("tables")

    def add(self, table: DiningTable) -> QueryResult:
        record = {
            "id": new_id(),
            "name": table.name,
            "capacity": table.capacity,
            "location": table.location,
            "status": TableStatus.AVAILABLE.value,
            "created_at": utc_now(),
        }
        return self._table().insert(record).first().map(self._row_to_table)

    def list_all(self) -> QueryResult:
        return self._table().select().order_by("name").execute().map(self._row_to_table)

    def get_by_id(self, table_id: str) -> QueryResult:
        return self._table().eq("id", table_id).single().execute().first().map(self._row_to_table)

    def update(self, table_id: str, changes: dict) -> QueryResult:
        return self._table().eq("id", table_id).update(changes).first().map(self._row_to_table)

    def set_status(self, table_id: str, status: TableStatus) -> QueryResult:
        """Mark a table available/occupied/reserved."""
        return self.update(table_id, {"status": TableStatus(status).value})

    def delete(self, table_id: str) -> QueryResult:
        return self._table().eq("id", table_id).delete()

    @staticmethod
    def _row_to_table(row: dict) -> DiningTable:
        return from_row(DiningTable, row)
