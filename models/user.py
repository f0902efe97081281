"""
models/user.py
--------------
Domain models for staff accounts, login sessions and password resets.
"""

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass
class User:
    email: str
    password_hash: str
    full_name: str
    phone: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def public(self) -> dict:
        """The user as a dict, without the password hash."""
        data = asdict(self)
        data.pop("password_hash")
        return data


@dataclass
class Session:
    user_id: str
    expires_at: datetime
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at < (now or datetime.now(timezone.utc))


@dataclass
class PasswordReset:
    user_id: str
    token: str
    expires_at: datetime
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at < (now or datetime.now(timezone.utc))
