"""
Profile resolver.

Turns a live session's user id into a Profile. Availability wins over
strictness here: if the profile store is down the user is shown as a
guest rather than blocked.
"""

import logging
from typing import Optional

from .interfaces import IProfileStore
from .models import Profile, Role
from .exceptions import ProfileConflictError

logger = logging.getLogger(__name__)


class ProfileResolver:
    """Resolves profiles with lazy first-login creation and a guest fallback."""

    def __init__(self, store: IProfileStore):
        self._store = store

    async def resolve_profile(
        self,
        user_id: str,
        display_name: Optional[str] = None,
    ) -> Profile:
        """
        Resolve the profile for a user.

        Creates a guest profile on first access. Never raises: any store
        failure yields a synthetic guest profile.

        Args:
            user_id: User id from a live session
            display_name: Name from the session metadata, used on creation

        Returns:
            The stored profile, or a synthetic guest profile on failure
        """
        try:
            profile = await self._store.fetch_profile(user_id)
            if profile is not None:
                return profile
            return await self._create(user_id, display_name)
        except Exception as e:
            logger.warning(
                f"Profile lookup failed for {user_id}, falling back to guest: {e}"
            )
            return Profile.guest(user_id)

    async def _create(self, user_id: str, display_name: Optional[str]) -> Profile:
        try:
            profile = await self._store.create_profile(
                user_id, full_name=display_name, role=Role.GUEST
            )
            logger.info(f"Created guest profile for {user_id}")
            return profile
        except ProfileConflictError:
            # Concurrent first login won the insert
            logger.debug(f"Profile for {user_id} created concurrently, re-fetching")
            profile = await self._store.fetch_profile(user_id)
            if profile is None:
                raise
            return profile
