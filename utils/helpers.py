"""
utils/helpers.py
----------------
Small helpers shared by the repositories and services.
"""

import uuid
from dataclasses import fields
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from psycopg2.extras import Json


def new_id() -> str:
    """Generate a primary key for a new record."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def jsonb(value: Any) -> Optional[Json]:
    """Wrap a dict/list so psycopg2 sends it as JSON; None stays NULL."""
    return None if value is None else Json(value)


def from_row(cls, row: dict, floats: Iterable[str] = ()):
    """
    Build a dataclass instance from a row dict.

    Unknown columns are ignored; NUMERIC columns listed in `floats`
    are converted from Decimal to float.
    """
    names = {f.name for f in fields(cls)}
    values = {k: v for k, v in row.items() if k in names}
    for name in floats:
        if values.get(name) is not None:
            values[name] = float(values[name])
    for key, value in values.items():
        if isinstance(value, uuid.UUID):
            values[key] = str(value)
    return cls(**values)
