"""Unit tests for ProfileService."""

from unittest.mock import MagicMock

import pytest

from db.results import CountResult, QueryResult
from services.errors import ConflictError, NotFoundError
from services.profile_service import ProfileService


@pytest.fixture
def profiles(db):
    service = ProfileService(db)
    service.profiles = MagicMock()
    service.orders = MagicMock()
    return service


class TestProfileService:
    def test_delete_refused_with_orders(self, profiles):
        profiles.orders.count_by_customer.return_value = CountResult(count=1)

        result = profiles.delete_profile("p1")

        assert isinstance(result.error, ConflictError)
        profiles.profiles.delete.assert_not_called()

    def test_missing_profile(self, profiles):
        profiles.profiles.get_by_id.return_value = QueryResult.success(None)

        result = profiles.get_profile("p1")

        assert isinstance(result.error, NotFoundError)

    def test_update_rejects_unknown_fields(self, profiles):
        result = profiles.update_profile("p1", {"password": "x"})

        assert isinstance(result.error, ValueError)
        profiles.profiles.update.assert_not_called()
