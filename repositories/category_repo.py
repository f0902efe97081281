"""
repositories/category_repo.py
------------------------------
Data access layer for menu categories.
"""

from db.results import QueryResult
from models.menu import Category
from utils.helpers import from_row, new_id, utc_now


class CategoryRepository:
    """Repository for CRUD operations on the categories table."""

    def __init__(self, executor):
        self.executor = executor

    def _table(self):
        return self.executor.from_("categories")

    # ── CREATE ────────────────────────────────────────────

    def add(self, name: str) -> QueryResult:
        """
        Insert a new category.

        Returns:
            QueryResult whose data is the stored Category.
        """
        record = {"id": new_id(), "name": name, "created_at": utc_now()}
        return self._table().insert(record).first().map(self._row_to_category)

    # ── READ ──────────────────────────────────────────────

    def list_all(self) -> QueryResult:
        """All categories ordered by name."""
        return self._table().select().order_by("name").execute().map(self._row_to_category)

    def get_by_id(self, category_id: str) -> QueryResult:
        """Fetch one category; data is None when it does not exist."""
        return (
            self._table().eq("id", category_id).single().execute()
            .first().map(self._row_to_category)
        )

    # ── UPDATE ────────────────────────────────────────────

    def rename(self, category_id: str, name: str) -> QueryResult:
        return (
            self._table().eq("id", category_id).update({"name": name})
            .first().map(self._row_to_category)
        )

    # ── DELETE ────────────────────────────────────────────

    def delete(self, category_id: str) -> QueryResult:
        """Delete a category; data is the list of deleted rows."""
        return self._table().eq("id", category_id).delete()

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_category(row: dict) -> Category:
        return from_row(Category, row)
