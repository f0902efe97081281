"""
models/profile.py
-----------------
Domain model for customer profiles.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Profile:
    """A known customer, optionally linked to orders."""
    full_name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
