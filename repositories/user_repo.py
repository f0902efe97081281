"""
repositories/user_repo.py
--------------------------
Data access layer for staff accounts, login sessions and password resets.
"""

from datetime import datetime

from db.results import QueryResult
from models.user import PasswordReset, Session, User
from utils.helpers import from_row, new_id, utc_now


class UserRepository:
    """Repository for the users table."""

    def __init__(self, executor):
        self.executor = executor

    def _table(self):
        return self.executor.from_("users")

    def add(self, email: str, password_hash: str, full_name: str, phone: str = None) -> QueryResult:
        now = utc_now()
        record = {
            "id": new_id(),
            "email": email,
            "password_hash": password_hash,
            "full_name": full_name,
            "phone": phone,
            "created_at": now,
            "updated_at": now,
        }
        return self._table().insert(record).first().map(self._row_to_user)

    def get_by_email(self, email: str) -> QueryResult:
        return self._table().eq("email", email).single().execute().first().map(self._row_to_user)

    def get_by_id(self, user_id: str) -> QueryResult:
        return self._table().eq("id", user_id).single().execute().first().map(self._row_to_user)

    def update_password(self, user_id: str, password_hash: str) -> QueryResult:
        values = {"password_hash": password_hash, "updated_at": utc_now()}
        return self._table().eq("id", user_id).update(values).first().map(self._row_to_user)

    @staticmethod
    def _row_to_user(row: dict) -> User:
        return from_row(User, row)


class SessionRepository:
    """Repository for the sessions table (login sessions)."""

    def __init__(self, executor):
        self.executor = executor

    def _table(self):
        return self.executor.from_("sessions")

    def add(self, user_id: str, expires_at: datetime) -> QueryResult:
        record = {"id": new_id(), "user_id": user_id, "created_at": utc_now(), "expires_at": expires_at}
        return self._table().insert(record).first().map(self._row_to_session)

    def get_by_id(self, session_id: str) -> QueryResult:
        return self._table().eq("id", session_id).single().execute().first().map(self._row_to_session)

    def delete(self, session_id: str) -> QueryResult:
        return self._table().eq("id", session_id).delete()

    @staticmethod
    def _row_to_session(row: dict) -> Session:
        return from_row(Session, row)


class PasswordResetRepository:
    """Repository for the password_resets table."""

    def __init__(self, executor):
        self.executor = executor

    def _table(self):
        return self.executor.from_("password_resets")

    def add(self, user_id: str, token: str, expires_at: datetime) -> QueryResult:
        record = {
            "id": new_id(),
            "user_id": user_id,
            "token": token,
            "created_at": utc_now(),
            "expires_at": expires_at,
        }
        return self._table().insert(record).first().map(self._row_to_reset)

    def get_by_token(self, token: str) -> QueryResult:
        return self._table().eq("token", token).single().execute().first().map(self._row_to_reset)

    def delete(self, reset_id: str) -> QueryResult:
        return self._table().eq("id", reset_id).delete()

    def delete_for_user(self, user_id: str) -> QueryResult:
        return self._table().eq("user_id", user_id).delete()

    @staticmethod
    def _row_to_reset(row: dict) -> PasswordReset:
        return from_row(PasswordReset, row)
