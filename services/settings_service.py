"""
services/settings_service.py
----------------------------
Reads and updates the application settings row.
"""

from db.errors import ErrorKind, classify_error
from db.results import QueryResult
from models.settings import SETTINGS_SECTIONS, AppSettings
from repositories.settings_repo import SettingsRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class SettingsService:
    def __init__(self, db):
        self.db = db
        self.settings = SettingsRepository(db)

    def fetch_settings(self) -> QueryResult:
        """
        Current settings, bootstrapping storage when needed.

        A missing app_settings table is created, and an empty one is
        seeded with the default settings.
        """
        result = self.settings.get_current()
        if result.error and classify_error(result.error) is ErrorKind.UNDEFINED_TABLE:
            logger.warning("app_settings table missing, creating it")
            created = self.settings.create_table()
            if created.error:
                logger.error(f"Failed to create app_settings table: {created.error}")
                return created
            result = self.settings.get_current()

        if result.error:
            logger.error(f"Failed to fetch settings: {result.error}")
            return result

        if result.data is None:
            logger.info("No settings stored yet, saving defaults")
            result = self.settings.add(AppSettings())
            if result.error:
                logger.error(f"Failed to store default settings: {result.error}")
        return result

    def update_settings(self, changes: dict) -> QueryResult:
        """
        Merge `changes` into the stored sections and return the re-read row.

        Args:
            changes: {section: {key: value}} for any of store, order_flow
                and notifications. Keys not mentioned keep their value.
        """
        unknown = set(changes) - set(SETTINGS_SECTIONS)
        if unknown:
            return QueryResult.failure(ValueError(f"Unknown settings sections: {', '.join(sorted(unknown))}"))

        current = self.fetch_settings()
        if current.error:
            return current

        merged = {
            name: {**getattr(current.data, name), **values}
            for name, values in changes.items()
        }
        updated = self.settings.update(current.data.id, merged)
        if updated.error:
            logger.error(f"Failed to update settings: {updated.error}")
            return updated

        logger.info(f"Settings updated: {', '.join(sorted(merged))}")
        return self.settings.get_current()
