"""
services/table_service.py
-------------------------
Business logic for dining tables.
"""

from db.results import MutationResult, QueryResult
from models.table import DiningTable, TableStatus
from repositories.order_repo import OrderRepository
from repositories.table_repo import TableRepository
from services.errors import ConflictError, NotFoundError
from utils.logger import get_logger

logger = get_logger(__name__)

_TABLE_FIELDS = ("name", "capacity", "location", "status")


class TableService:
    """Manages the dining-room tables."""

    def __init__(self, db):
        self.db = db
        self.tables = TableRepository(db)
        self.orders = OrderRepository(db)

    def list_tables(self) -> QueryResult:
        result = self.tables.list_all()
        if result.error:
            logger.error(f"Failed to fetch tables: {result.error}")
        return result

    def get_table(self, table_id: str) -> QueryResult:
        result = self.tables.get_by_id(table_id)
        if result.error:
            logger.error(f"Failed to fetch table {table_id}: {result.error}")
        elif result.data is None:
            return QueryResult.failure(NotFoundError(f"Table {table_id} not found"))
        return result

    def add_table(self, name: str, capacity: int = None, location: str = None) -> QueryResult:
        """New tables always start as available."""
        result = self.tables.add(DiningTable(name=name, capacity=capacity, location=location))
        if result.error:
            logger.error(f"Failed to add table '{name}': {result.error}")
        return result

    def update_table(self, table_id: str, changes: dict) -> QueryResult:
        unknown = set(changes) - set(_TABLE_FIELDS)
        if unknown:
            return QueryResult.failure(ValueError(f"Unknown table fields: {', '.join(sorted(unknown))}"))
        if "status" in changes:
            try:
                changes = {**changes, "status": TableStatus(changes["status"]).value}
            except ValueError as e:
                return QueryResult.failure(e)

        result = self.tables.update(table_id, changes)
        if result.error:
            logger.error(f"Failed to update table {table_id}: {result.error}")
        elif result.data is None:
            return QueryResult.failure(NotFoundError(f"Table {table_id} not found"))
        return result

    def delete_table(self, table_id: str) -> MutationResult:
        """Delete a table that has no orders."""
        in_use = self.orders.count_by_table(table_id)
        if in_use.error:
            logger.error(f"Failed to check orders of table {table_id}: {in_use.error}")
            return MutationResult.failed(in_use.error)
        if in_use.count > 0:
            logger.warning(f"Refused to delete table {table_id}: used by {in_use.count} order(s)")
            return MutationResult.failed(
                ConflictError(f"Table is used by {in_use.count} order(s) and cannot be deleted")
            )

        result = self.tables.delete(table_id)
        if result.error:
            logger.error(f"Failed to delete table {table_id}: {result.error}")
            return MutationResult.failed(result.error)
        return MutationResult.done()
