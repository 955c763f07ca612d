"""
Profile module interface.

The profile resolver depends on IProfileStore, not on Supabase. Tests
supply in-memory stores; production wires ProfileRepository.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from .models import Profile, Role


@runtime_checkable
class IProfileStore(Protocol):
    """Data access needed to resolve and maintain profiles."""

    async def fetch_profile(self, user_id: str) -> Optional[Profile]:
        """
        Get a profile by user ID.

        Returns:
            The profile, or None if it doesn't exist
        """
        ...

    async def create_profile(
        self,
        user_id: str,
        full_name: Optional[str] = None,
        role: Role = Role.GUEST,
    ) -> Profile:
        """
        Insert a new profile.

        Raises:
            ProfileConflictError: If a profile with this id already exists
        """
        ...

    async def upsert_profile(self, user_id: str, patch: dict[str, Any]) -> Profile:
        """
        Apply a partial update to a profile, creating it if missing.

        Returns:
            The stored profile after the write
        """
        ...
