"""Unit tests for MenuService lookups, delete guards and updates."""

from unittest.mock import MagicMock

import pytest

from db.results import CountResult, QueryResult
from models.menu import Category, MenuItem
from services.errors import ConflictError, NotFoundError
from services.menu_service import MenuService


@pytest.fixture
def menu(db):
    service = MenuService(db)
    service.categories = MagicMock()
    service.items = MagicMock()
    service.orders = MagicMock()
    return service


class TestDeleteCategory:
    """Categories in use cannot be deleted."""

    def test_refused_while_items_reference_it(self, menu):
        menu.items.count_by_category.return_value = CountResult(count=2)

        result = menu.delete_category("c1")

        assert not result.success
        assert isinstance(result.error, ConflictError)
        menu.categories.delete.assert_not_called()

    def test_deleted_when_unused(self, menu):
        menu.items.count_by_category.return_value = CountResult(count=0)
        menu.categories.delete.return_value = QueryResult.success([{"id": "c1"}])

        result = menu.delete_category("c1")

        assert result.success
        menu.categories.delete.assert_called_once_with("c1")

    def test_count_failure_is_reported(self, menu):
        error = RuntimeError("db down")
        menu.items.count_by_category.return_value = CountResult(error=error)

        result = menu.delete_category("c1")

        assert result.error is error
        menu.categories.delete.assert_not_called()


class TestMenuItems:
    """Menu item updates and deletes."""

    def test_update_maps_available_flag(self, menu):
        menu.items.update.return_value = QueryResult.success(MenuItem(name="Cola", price=5.0, is_available=False))

        result = menu.update_menu_item("m1", {"available": False, "price": 5.0})

        assert result.ok
        menu.items.update.assert_called_once_with("m1", {"is_available": False, "price": 5.0})

    def test_update_rejects_unknown_fields(self, menu):
        result = menu.update_menu_item("m1", {"colour": "red"})

        assert isinstance(result.error, ValueError)
        menu.items.update.assert_not_called()

    def test_update_missing_item(self, menu):
        menu.items.update.return_value = QueryResult.success(None)

        result = menu.update_menu_item("m1", {"name": "Cola"})

        assert isinstance(result.error, NotFoundError)

    def test_delete_refused_while_ordered(self, menu):
        menu.orders.count_items_by_menu_item.return_value = CountResult(count=1)

        result = menu.delete_menu_item("m1")

        assert isinstance(result.error, ConflictError)
        menu.items.delete.assert_not_called()

    def test_rename_category(self, menu):
        menu.categories.rename.return_value = QueryResult.success(Category(name="Beverages", id="c1"))

        result = menu.update_category("c1", "Beverages")

        assert result.data.name == "Beverages"


class TestLookups:
    """Single-row reads report missing rows as NotFoundError."""

    def test_missing_menu_item(self, menu):
        menu.items.get_by_id.return_value = QueryResult.success(None)

        result = menu.get_menu_item("m9")

        assert result.data is None
        assert isinstance(result.error, NotFoundError)

    def test_missing_category(self, menu):
        menu.categories.get_by_id.return_value = QueryResult.success(None)

        result = menu.get_category("c9")

        assert isinstance(result.error, NotFoundError)

    def test_found_menu_item(self, menu):
        item = MenuItem(name="Cola", price=5.0, id="m1")
        menu.items.get_by_id.return_value = QueryResult.success(item)

        result = menu.get_menu_item("m1")

        assert result.data is item
        assert result.error is None
