"""Unit tests for SettingsService."""

from unittest.mock import MagicMock

from psycopg2 import errors

from db.results import QueryResult
from models.settings import AppSettings
from services.settings_service import SettingsService


def service_with_repo(db):
    service = SettingsService(db)
    service.settings = MagicMock()
    return service


class TestFetchSettings:
    def test_missing_table_is_created(self, db):
        service = service_with_repo(db)
        stored = AppSettings(id="s1")
        service.settings.get_current.side_effect = [
            QueryResult.failure(errors.UndefinedTable('relation "app_settings" does not exist')),
            QueryResult.success(stored),
        ]
        service.settings.create_table.return_value = QueryResult.success([])

        result = service.fetch_settings()

        assert result.data is stored
        service.settings.create_table.assert_called_once()

    def test_defaults_saved_when_empty(self, db):
        service = service_with_repo(db)
        service.settings.get_current.return_value = QueryResult.success(None)
        service.settings.add.side_effect = lambda settings: QueryResult.success(settings)

        result = service.fetch_settings()

        assert result.data.store["name"] == "Pizzaria"
        service.settings.add.assert_called_once()

    def test_other_errors_pass_through(self, db):
        service = service_with_repo(db)
        error = RuntimeError("db down")
        service.settings.get_current.return_value = QueryResult.failure(error)

        result = service.fetch_settings()

        assert result.error is error
        service.settings.create_table.assert_not_called()


class TestUpdateSettings:
    def test_sections_are_merged(self, db):
        service = service_with_repo(db)
        current = AppSettings(id="s1")
        service.settings.get_current.return_value = QueryResult.success(current)
        service.settings.update.return_value = QueryResult.success(current)

        service.update_settings({"store": {"name": "Pizzaria Bella"}})

        settings_id, sections = service.settings.update.call_args[0]
        assert settings_id == "s1"
        assert sections["store"]["name"] == "Pizzaria Bella"
        assert sections["store"]["currency"] == "BRL"
        assert "order_flow" not in sections

    def test_unknown_section(self, db):
        service = service_with_repo(db)

        result = service.update_settings({"kitchen": {}})

        assert isinstance(result.error, ValueError)
