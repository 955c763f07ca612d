"""
Profile repository for database access.

Encapsulates all Supabase queries and data mapping for the profiles table.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError

from shared.repository import BaseRepository
from .interfaces import IProfileStore
from .models import Profile, ProfileStats, Role, resolve_role
from .exceptions import ProfileConflictError, ProfileNotFoundError

TABLE = "profiles"


class ProfileRepository(BaseRepository[Profile], IProfileStore):
    """
    Repository for profile data access.

    Note: This repository does NOT perform authorization checks.
    The service layer and route guards decide who may call what.
    """

    async def fetch_profile(self, user_id: str) -> Optional[Profile]:
        """Get a profile by user ID, or None when it doesn't exist."""
        result = self._db.table(TABLE).select("*").eq("id", user_id).limit(1).execute()
        row = self._first(result)
        return Profile.model_validate(row) if row else None

    async def create_profile(
        self,
        user_id: str,
        full_name: Optional[str] = None,
        role: Role = Role.GUEST,
    ) -> Profile:
        """
        Insert a new profile.

        The profiles primary key is the user id, so a concurrent insert for
        the same user fails with a unique violation.
        """
        data = {"id": user_id, "full_name": full_name, "role": role.value}
        try:
            result = self._db.table(TABLE).insert(data).execute()
        except APIError as e:
            if self._is_unique_violation(e):
                raise ProfileConflictError(user_id)
            raise
        return Profile.model_validate(result.data[0])

    async def upsert_profile(self, user_id: str, patch: dict[str, Any]) -> Profile:
        """Apply a partial update, creating the row if missing."""
        data = {k: (v.value if isinstance(v, Role) else v) for k, v in patch.items()}
        data["id"] = user_id
        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = self._db.table(TABLE).upsert(data, on_conflict="id").execute()
        return Profile.model_validate(result.data[0])

    async def update_role(self, user_id: str, role: Role) -> Profile:
        """
        Set a user's role.

        Raises:
            ProfileNotFoundError: If no profile matched
        """
        data = {
            "role": role.value,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        result = self._db.table(TABLE).update(data).eq("id", user_id).execute()
        row = self._first(result)
        if row is None:
            raise ProfileNotFoundError(user_id)
        return Profile.model_validate(row)

    async def list_profiles(self, role: Optional[Role] = None) -> list[Profile]:
        """List profiles, newest first, optionally filtered by role."""
        query = self._db.table(TABLE).select("*")
        if role is not None:
            query = query.eq("role", role.value)
        result = query.order("created_at", desc=True).execute()
        return [Profile.model_validate(row) for row in result.data or []]

    async def delete_profile(self, user_id: str) -> bool:
        """Delete a profile. Returns True if a row was removed."""
        result = self._db.table(TABLE).delete().eq("id", user_id).execute()
        return bool(result.data)

    async def get_stats(self) -> ProfileStats:
        """Count profiles per role."""
        result = self._db.table(TABLE).select("role").execute()
        stats = ProfileStats()
        for row in result.data or []:
            role = resolve_role(row)
            setattr(stats, role.value, getattr(stats, role.value) + 1)
            stats.total += 1
        return stats

    async def has_admin(self) -> bool:
        """Whether at least one admin profile exists."""
        result = (
            self._db.table(TABLE)
            .select("id")
            .eq("role", Role.ADMIN.value)
            .limit(1)
            .execute()
        )
        return bool(result.data)
