"""
models/menu.py
--------------
Domain models for menu categories and menu items.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass
class Category:
    """A menu section (e.g. Drinks, Pizzas)."""
    name: str
    id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class MenuItem:
    """
    Represents a dish or drink that can be ordered.

    Attributes:
        id: Database primary key (None for new records).
        name: Display name.
        price: Base price.
        description: Optional text shown on the menu.
        category_id: Owning category, if any.
        image_url: Optional picture.
        is_available: Whether the item can currently be ordered.
        item_type: Free-form kind, 'regular' by default (e.g. 'pizza').
        send_to_kitchen: Whether orders for this item go to the kitchen.
        sizes: Optional list of size options (stored as JSON).
        crusts: Optional list of crust options (stored as JSON).
        allow_half_and_half: Whether two flavors can share one item.
        created_at: Timestamp when the record was created.
    """
    name: str
    price: float
    description: Optional[str] = None
    category_id: Optional[str] = None
    image_url: Optional[str] = None
    is_available: bool = True
    item_type: str = "regular"
    send_to_kitchen: bool = True
    sizes: Optional[Any] = None
    crusts: Optional[Any] = None
    allow_half_and_half: bool = False
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    def __str__(self) -> str:
        status = "✅" if self.is_available else "❌"
        return f"{status} {self.name}: {self.price:.2f}"
