"""
services/menu_service.py
------------------------
Business logic for menu categories and menu items.
"""

from db.results import MutationResult, QueryResult
from models.menu import MenuItem
from repositories.category_repo import CategoryRepository
from repositories.menu_repo import MenuItemRepository
from repositories.order_repo import OrderRepository
from services.errors import ConflictError, NotFoundError
from utils.logger import get_logger

logger = get_logger(__name__)

# Fields accepted by update_menu_item -> column name.
_MENU_ITEM_FIELDS = {
    "name": "name",
    "description": "description",
    "price": "price",
    "category_id": "category_id",
    "image_url": "image_url",
    "available": "is_available",
    "is_available": "is_available",
    "item_type": "item_type",
    "send_to_kitchen": "send_to_kitchen",
    "sizes": "sizes",
    "crusts": "crusts",
    "allow_half_and_half": "allow_half_and_half",
}


class MenuService:
    """Manages categories and the menu items filed under them."""

    def __init__(self, db):
        self.db = db
        self.categories = CategoryRepository(db)
        self.items = MenuItemRepository(db)
        self.orders = OrderRepository(db)

    # ── CATEGORIES ────────────────────────────────────────

    def list_categories(self) -> QueryResult:
        result = self.categories.list_all()
        if result.error:
            logger.error(f"Failed to fetch categories: {result.error}")
        return result

    def get_category(self, category_id: str) -> QueryResult:
        result = self.categories.get_by_id(category_id)
        if result.error:
            logger.error(f"Failed to fetch category {category_id}: {result.error}")
        elif result.data is None:
            return QueryResult.failure(NotFoundError(f"Category {category_id} not found"))
        return result

    def add_category(self, name: str) -> QueryResult:
        result = self.categories.add(name)
        if result.error:
            logger.error(f"Failed to add category '{name}': {result.error}")
        else:
            logger.info(f"Added category '{name}' ({result.data.id})")
        return result

    def update_category(self, category_id: str, name: str) -> QueryResult:
        result = self.categories.rename(category_id, name)
        if result.error:
            logger.error(f"Failed to update category {category_id}: {result.error}")
        elif result.data is None:
            return QueryResult.failure(NotFoundError(f"Category {category_id} not found"))
        return result

    def delete_category(self, category_id: str) -> MutationResult:
        """
        Delete a category that no menu item uses.

        Returns:
            MutationResult; ConflictError when menu items still reference it.
        """
        in_use = self.items.count_by_category(category_id)
        if in_use.error:
            logger.error(f"Failed to check menu items of category {category_id}: {in_use.error}")
            return MutationResult.failed(in_use.error)
        if in_use.count > 0:
            logger.warning(f"Refused to delete category {category_id}: used by {in_use.count} menu item(s)")
            return MutationResult.failed(
                ConflictError(f"Category is used by {in_use.count} menu item(s) and cannot be deleted")
            )

        result = self.categories.delete(category_id)
        if result.error:
            logger.error(f"Failed to delete category {category_id}: {result.error}")
            return MutationResult.failed(result.error)
        return MutationResult.done()

    # ── MENU ITEMS ────────────────────────────────────────

    def list_menu_items(self) -> QueryResult:
        result = self.items.list_all()
        if result.error:
            logger.error(f"Failed to fetch menu items: {result.error}")
        return result

    def get_menu_item(self, item_id: str) -> QueryResult:
        result = self.items.get_by_id(item_id)
        if result.error:
            logger.error(f"Failed to fetch menu item {item_id}: {result.error}")
        elif result.data is None:
            return QueryResult.failure(NotFoundError(f"Menu item {item_id} not found"))
        return result

    def add_menu_item(self, item: MenuItem) -> QueryResult:
        result = self.items.add(item)
        if result.error:
            logger.error(f"Failed to add menu item '{item.name}': {result.error}")
        return result

    def update_menu_item(self, item_id: str, changes: dict) -> QueryResult:
        """
        Update only the provided fields of a menu item.

        Args:
            item_id: Primary key.
            changes: Field -> value; `available` is accepted for `is_available`.
        """
        unknown = set(changes) - set(_MENU_ITEM_FIELDS)
        if unknown:
            return QueryResult.failure(ValueError(f"Unknown menu item fields: {', '.join(sorted(unknown))}"))

        values = {_MENU_ITEM_FIELDS[k]: v for k, v in changes.items()}
        result = self.items.update(item_id, values)
        if result.error:
            logger.error(f"Failed to update menu item {item_id}: {result.error}")
        elif result.data is None:
            return QueryResult.failure(NotFoundError(f"Menu item {item_id} not found"))
        return result

    def delete_menu_item(self, item_id: str) -> MutationResult:
        """Delete a menu item that has never been ordered."""
        in_use = self.orders.count_items_by_menu_item(item_id)
        if in_use.error:
            logger.error(f"Failed to check orders of menu item {item_id}: {in_use.error}")
            return MutationResult.failed(in_use.error)
        if in_use.count > 0:
            logger.warning(f"Refused to delete menu item {item_id}: used by {in_use.count} order(s)")
            return MutationResult.failed(
                ConflictError(f"Menu item is used by {in_use.count} order(s) and cannot be deleted")
            )

        result = self.items.delete(item_id)
        if result.error:
            logger.error(f"Failed to delete menu item {item_id}: {result.error}")
            return MutationResult.failed(result.error)
        return MutationResult.done()
