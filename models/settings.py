"""
models/settings.py
------------------
Application settings stored as a single row of JSON documents.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

DEFAULT_SETTINGS = {
    "store": {
        "name": "Pizzaria",
        "phone": "",
        "address": "",
        "currency": "BRL",
    },
    "order_flow": {
        "auto_progress": True,
        "preparation_minutes": 20,
        "delivery_minutes": 30,
    },
    "notifications": {
        "sound_enabled": True,
        "new_order_alert": True,
    },
}

SETTINGS_SECTIONS = ("store", "order_flow", "notifications")


def default_section(name: str) -> dict:
    return copy.deepcopy(DEFAULT_SETTINGS[name])


@dataclass
class AppSettings:
    store: dict = field(default_factory=lambda: default_section("store"))
    order_flow: dict = field(default_factory=lambda: default_section("order_flow"))
    notifications: dict = field(default_factory=lambda: default_section("notifications"))
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
