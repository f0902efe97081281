"""
models/table.py
---------------
Domain model for dining tables.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"


@dataclass
class DiningTable:
    """A table in the dining room; `status` follows the orders placed on it."""
    name: str
    capacity: Optional[int] = None
    location: Optional[str] = None
    status: str = TableStatus.AVAILABLE.value
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    def is_available(self) -> bool:
        return self.status == TableStatus.AVAILABLE.value
