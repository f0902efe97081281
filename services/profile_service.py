"""
services/profile_service.py
---------------------------
Business logic for customer profiles.
"""

from db.results import MutationResult, QueryResult
from models.profile import Profile
from repositories.order_repo import OrderRepository
from repositories.profile_repo import ProfileRepository
from services.errors import ConflictError, NotFoundError
from utils.logger import get_logger

logger = get_logger(__name__)

_PROFILE_FIELDS = ("full_name", "phone", "email", "address", "notes")


class ProfileService:
    """Manages customer profiles."""

    def __init__(self, db):
        self.db = db
        self.profiles = ProfileRepository(db)
        self.orders = OrderRepository(db)

    def list_profiles(self) -> QueryResult:
        result = self.profiles.list_all()
        if result.error:
            logger.error(f"Failed to fetch profiles: {result.error}")
        return result

    def get_profile(self, profile_id: str) -> QueryResult:
        result = self.profiles.get_by_id(profile_id)
        if result.error:
            logger.error(f"Failed to fetch profile {profile_id}: {result.error}")
        elif result.data is None:
            return QueryResult.failure(NotFoundError(f"Profile {profile_id} not found"))
        return result

    def add_profile(self, profile: Profile) -> QueryResult:
        result = self.profiles.add(profile)
        if result.error:
            logger.error(f"Failed to add profile '{profile.full_name}': {result.error}")
        return result

    def update_profile(self, profile_id: str, changes: dict) -> QueryResult:
        unknown = set(changes) - set(_PROFILE_FIELDS)
        if unknown:
            return QueryResult.failure(ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}"))

        result = self.profiles.update(profile_id, changes)
        if result.error:
            logger.error(f"Failed to update profile {profile_id}: {result.error}")
        elif result.data is None:
            return QueryResult.failure(NotFoundError(f"Profile {profile_id} not found"))
        return result

    def delete_profile(self, profile_id: str) -> MutationResult:
        """Delete a profile that no order references."""
        in_use = self.orders.count_by_customer(profile_id)
        if in_use.error:
            logger.error(f"Failed to check orders of profile {profile_id}: {in_use.error}")
            return MutationResult.failed(in_use.error)
        if in_use.count > 0:
            logger.warning(f"Refused to delete profile {profile_id}: used by {in_use.count} order(s)")
            return MutationResult.failed(
                ConflictError(f"Profile is used by {in_use.count} order(s) and cannot be deleted")
            )

        result = self.profiles.delete(profile_id)
        if result.error:
            logger.error(f"Failed to delete profile {profile_id}: {result.error}")
            return MutationResult.failed(result.error)
        return MutationResult.done()
