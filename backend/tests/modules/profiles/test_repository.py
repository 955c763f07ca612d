"""Tests for ProfileRepository against a mocked Supabase client."""

import pytest
from unittest.mock import MagicMock

from postgrest.exceptions import APIError

from modules.profiles.exceptions import ProfileConflictError, ProfileNotFoundError
from modules.profiles.models import Role
from modules.profiles.repository import ProfileRepository


@pytest.fixture
def mock_db():
    return MagicMock()


@pytest.fixture
def repo(mock_db):
    return ProfileRepository(mock_db)


def _result(data):
    result = MagicMock()
    result.data = data
    return result


class TestFetchProfile:
    @pytest.mark.asyncio
    async def test_fetch_existing(self, repo, mock_db):
        mock_db.table.return_value.select.return_value.eq.return_value.limit.return_value.execute.return_value = _result(
            [{"id": "user-1", "full_name": "Ada", "role": "admin"}]
        )

        profile = await repo.fetch_profile("user-1")

        mock_db.table.assert_called_with("profiles")
        assert profile.id == "user-1"
        assert profile.role == Role.ADMIN

    @pytest.mark.asyncio
    async def test_fetch_missing(self, repo, mock_db):
        mock_db.table.return_value.select.return_value.eq.return_value.limit.return_value.execute.return_value = _result([])
        assert await repo.fetch_profile("user-1") is None

    @pytest.mark.asyncio
    async def test_fetch_legacy_shape(self, repo, mock_db):
        mock_db.table.return_value.select.return_value.eq.return_value.limit.return_value.execute.return_value = _result(
            [{"id": "user-1", "profile": {"role": "subscriber"}}]
        )
        profile = await repo.fetch_profile("user-1")
        assert profile.role == Role.SUBSCRIBER


class TestCreateProfile:
    @pytest.mark.asyncio
    async def test_create(self, repo, mock_db):
        mock_db.table.return_value.insert.return_value.execute.return_value = _result(
            [{"id": "user-1", "full_name": "Ada", "role": "guest"}]
        )

        profile = await repo.create_profile("user-1", full_name="Ada")

        mock_db.table.return_value.insert.assert_called_once_with(
            {"id": "user-1", "full_name": "Ada", "role": "guest"}
        )
        assert profile.role == Role.GUEST

    @pytest.mark.asyncio
    async def test_duplicate_raises_conflict(self, repo, mock_db):
        mock_db.table.return_value.insert.return_value.execute.side_effect = APIError(
            {"message": "duplicate key value", "code": "23505"}
        )
        with pytest.raises(ProfileConflictError):
            await repo.create_profile("user-1")

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, repo, mock_db):
        mock_db.table.return_value.insert.return_value.execute.side_effect = APIError(
            {"message": "permission denied", "code": "42501"}
        )
        with pytest.raises(APIError):
            await repo.create_profile("user-1")


class TestUpdates:
    @pytest.mark.asyncio
    async def test_upsert_serializes_role(self, repo, mock_db):
        mock_db.table.return_value.upsert.return_value.execute.return_value = _result(
            [{"id": "user-1", "role": "subscriber"}]
        )

        profile = await repo.upsert_profile("user-1", {"role": Role.SUBSCRIBER})

        data = mock_db.table.return_value.upsert.call_args[0][0]
        assert data["id"] == "user-1"
        assert data["role"] == "subscriber"
        assert "updated_at" in data
        assert mock_db.table.return_value.upsert.call_args[1] == {"on_conflict": "id"}
        assert profile.role == Role.SUBSCRIBER

    @pytest.mark.asyncio
    async def test_update_role(self, repo, mock_db):
        mock_db.table.return_value.update.return_value.eq.return_value.execute.return_value = _result(
            [{"id": "user-1", "role": "admin"}]
        )
        profile = await repo.update_role("user-1", Role.ADMIN)
        assert profile.role == Role.ADMIN

    @pytest.mark.asyncio
    async def test_update_role_missing_profile(self, repo, mock_db):
        mock_db.table.return_value.update.return_value.eq.return_value.execute.return_value = _result([])
        with pytest.raises(ProfileNotFoundError):
            await repo.update_role("user-1", Role.ADMIN)

    @pytest.mark.asyncio
    async def test_delete(self, repo, mock_db):
        mock_db.table.return_value.delete.return_value.eq.return_value.execute.return_value = _result(
            [{"id": "user-1"}]
        )
        assert await repo.delete_profile("user-1") is True

    @pytest.mark.asyncio
    async def test_delete_missing(self, repo, mock_db):
        mock_db.table.return_value.delete.return_value.eq.return_value.execute.return_value = _result([])
        assert await repo.delete_profile("user-1") is False


class TestQueries:
    @pytest.mark.asyncio
    async def test_list_profiles_filters_by_role(self, repo, mock_db):
        query = mock_db.table.return_value.select.return_value
        query.eq.return_value.order.return_value.execute.return_value = _result(
            [{"id": "a", "role": "admin"}]
        )

        profiles = await repo.list_profiles(Role.ADMIN)

        query.eq.assert_called_once_with("role", "admin")
        query.eq.return_value.order.assert_called_once_with("created_at", desc=True)
        assert [p.id for p in profiles] == ["a"]

    @pytest.mark.asyncio
    async def test_get_stats(self, repo, mock_db):
        mock_db.table.return_value.select.return_value.execute.return_value = _result(
            [
                {"role": "admin"},
                {"role": "subscriber"},
                {"role": "SUBSCRIBER"},
                {"role": None},
                {"role": "mystery"},
            ]
        )

        stats = await repo.get_stats()

        assert stats.total == 5
        assert stats.admin == 1
        assert stats.subscriber == 2
        assert stats.guest == 2

    @pytest.mark.asyncio
    async def test_has_admin(self, repo, mock_db):
        mock_db.table.return_value.select.return_value.eq.return_value.limit.return_value.execute.return_value = _result(
            [{"id": "a"}]
        )
        assert await repo.has_admin() is True
