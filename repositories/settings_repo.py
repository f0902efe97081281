"""
repositories/settings_repo.py
------------------------------
Data access layer for the single-row app_settings table.
"""

from db.init_db import SETTINGS_TABLE_SQL
from db.results import QueryResult
from models.settings import AppSettings
from utils.helpers import from_row, jsonb, new_id, utc_now


class SettingsRepository:
    """Repository for the app_settings table."""

    def __init__(self, executor):
        self.executor = executor

    def _table(self):
        return self.executor.from_("app_settings")

    def create_table(self) -> QueryResult:
        return self.executor.query(SETTINGS_TABLE_SQL)

    def get_current(self) -> QueryResult:
        """The stored settings row; data is None when none exists yet."""
        return self._table().order_by("created_at").single().execute().first().map(self._row_to_settings)

    def add(self, settings: AppSettings) -> QueryResult:
        now = utc_now()
        record = {
            "id": new_id(),
            "store": jsonb(settings.store),
            "order_flow": jsonb(settings.order_flow),
            "notifications": jsonb(settings.notifications),
            "created_at": now,
            "updated_at": now,
        }
        return self._table().insert(record).first().map(self._row_to_settings)

    def update(self, settings_id: str, sections: dict) -> QueryResult:
        """Replace the given JSON sections (store/order_flow/notifications)."""
        values = {name: jsonb(value) for name, value in sections.items()}
        values["updated_at"] = utc_now()
        return self._table().eq("id", settings_id).update(values).first().map(self._row_to_settings)

    @staticmethod
    def _row_to_settings(row: dict) -> AppSettings:
        return from_row(AppSettings, row)
