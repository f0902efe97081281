"""
repositories/profile_repo.py
-----------------------------
Data access layer for customer profiles.
"""

from db.results import QueryResult
from models.profile import Profile
from utils.helpers import from_row, new_id, utc_now


class ProfileRepository:
    """Repository for CRUD operations on the profiles table."""

    def __init__(self, executor):
        self.executor = executor

    def _table(self):
        return self.executor.from_("profiles")

    def add(self, profile: Profile) -> QueryResult:
        now = utc_now()
        record = {
            "id": new_id(),
            "full_name": profile.full_name,
            "phone": profile.phone,
            "email": profile.email,
            "address": profile.address,
            "notes": profile.notes,
            "created_at": now,
            "updated_at": now,
        }
        return self._table().insert(record).first().map(self._row_to_profile)

    def list_all(self) -> QueryResult:
        return self._table().select().order_by("full_name").execute().map(self._row_to_profile)

    def get_by_id(self, profile_id: str) -> QueryResult:
        return self._table().eq("id", profile_id).single().execute().first().map(self._row_to_profile)

    def update(self, profile_id: str, changes: dict) -> QueryResult:
        """Update the given columns; `updated_at` is always refreshed."""
        values = {**changes, "updated_at": utc_now()}
        return self._table().eq("id", profile_id).update(values).first().map(self._row_to_profile)

    def delete(self, profile_id: str) -> QueryResult:
        return self._table().eq("id", profile_id).delete()

    @staticmethod
    def _row_to_profile(row: dict) -> Profile:
        return from_row(Profile, row)
