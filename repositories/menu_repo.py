"""
repositories/menu_repo.py
--------------------------
Data access layer for menu items.
"""

from db.results import CountResult, QueryResult
from models.menu import MenuItem
from utils.helpers import from_row, jsonb, new_id, utc_now

_JSON_COLUMNS = ("sizes", "crusts")


class MenuItemRepository:
    """Repository for CRUD operations on the menu_items table."""

    def __init__(self, executor):
        self.executor = executor

    def _table(self):
        return self.executor.from_("menu_items")

    # ── CREATE ────────────────────────────────────────────

    def add(self, item: MenuItem) -> QueryResult:
        """
        Insert a new menu item.

        Args:
            item: The MenuItem to persist (`id` and `created_at` are generated).

        Returns:
            QueryResult whose data is the stored MenuItem.
        """
        record = {
            "id": new_id(),
            "name": item.name,
            "description": item.description,
            "price": item.price,
            "category_id": item.category_id,
            "image_url": item.image_url,
            "is_available": item.is_available,
            "item_type": item.item_type,
            "send_to_kitchen": item.send_to_kitchen,
            "sizes": jsonb(item.sizes),
            "crusts": jsonb(item.crusts),
            "allow_half_and_half": item.allow_half_and_half,
            "created_at": utc_now(),
        }
        return self._table().insert(record).first().map(self._row_to_item)

    # ── READ ──────────────────────────────────────────────

    def list_all(self) -> QueryResult:
        return self._table().select().order_by("name").execute().map(self._row_to_item)

    def get_by_id(self, item_id: str) -> QueryResult:
        return self._table().eq("id", item_id).single().execute().first().map(self._row_to_item)

    def count_by_category(self, category_id: str) -> CountResult:
        """Number of menu items filed under a category."""
        return self._table().eq("category_id", category_id).count()

    # ── UPDATE ────────────────────────────────────────────

    def update(self, item_id: str, changes: dict) -> QueryResult:
        """
        Update only the given columns of a menu item.

        Args:
            item_id: Primary key.
            changes: Column -> new value; JSON columns are wrapped automatically.
        """
        values = {k: jsonb(v) if k in _JSON_COLUMNS else v for k, v in changes.items()}
        return self._table().eq("id", item_id).update(values).first().map(self._row_to_item)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, item_id: str) -> QueryResult:
        return self._table().eq("id", item_id).delete()

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_item(row: dict) -> MenuItem:
        return from_row(MenuItem, row, floats=("price",))
