"""
Profile service.

Self-service and admin operations on profiles, plus first-admin setup.
Authorization is enforced by the route guards, not here.
"""

import logging
from typing import Optional, Union

from supabase import AuthError, Client

from shared.exceptions import ExternalServiceError

from .models import Profile, ProfileStats, Role, normalize_role
from .repository import ProfileRepository
from .exceptions import (
    AdminAlreadyExistsError,
    InvalidRoleError,
    ProfileNotFoundError,
    SelfDeletionError,
)

logger = logging.getLogger(__name__)


class ProfileService:
    """Profile management on top of ProfileRepository."""

    def __init__(self, repository: ProfileRepository, db: Optional[Client] = None):
        self._repo = repository
        self._db = db

    async def get_profile(self, user_id: str) -> Profile:
        """
        Get a profile.

        Raises:
            ProfileNotFoundError: If it doesn't exist
        """
        profile = await self._repo.fetch_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return profile

    async def update_own_profile(self, user_id: str, full_name: Optional[str]) -> Profile:
        """Update the caller's own display name. The role is never touched."""
        return await self._repo.upsert_profile(user_id, {"full_name": full_name})

    async def update_role(self, user_id: str, role: Union[Role, str]) -> Profile:
        """
        Change a user's role.

        Raises:
            InvalidRoleError: If the role isn't guest, subscriber or admin
            ProfileNotFoundError: If the user has no profile
        """
        if not isinstance(role, Role):
            parsed = normalize_role(role)
            if parsed is None or parsed.value != str(role).strip().lower():
                raise InvalidRoleError(str(role))
            role = parsed
        profile = await self._repo.update_role(user_id, role)
        logger.info(f"Role for {user_id} set to {role.value}")
        return profile

    async def list_profiles(self, role: Optional[Role] = None) -> list[Profile]:
        return await self._repo.list_profiles(role)

    async def delete_profile(self, actor_id: str, user_id: str) -> None:
        """
        Delete a profile.

        Raises:
            SelfDeletionError: If an admin targets their own profile
            ProfileNotFoundError: If nothing was deleted
        """
        if actor_id == user_id:
            raise SelfDeletionError()
        if not await self._repo.delete_profile(user_id):
            raise ProfileNotFoundError(user_id)
        logger.info(f"Profile {user_id} deleted by {actor_id}")

    async def get_stats(self) -> ProfileStats:
        return await self._repo.get_stats()

    # -------------------------------------------------------------------------
    # First-time setup
    # -------------------------------------------------------------------------

    async def is_setup_needed(self) -> bool:
        """True when no admin profile exists yet."""
        return not await self._repo.has_admin()

    async def create_first_admin(
        self,
        email: str,
        password: str,
        full_name: str = "Admin User",
    ) -> Profile:
        """
        Create the first admin account.

        Creates a confirmed auth user through the Supabase admin API and
        stores its profile with the admin role.

        Raises:
            AdminAlreadyExistsError: If any admin profile already exists
            ExternalServiceError: If Supabase refuses to create the user
        """
        if not await self.is_setup_needed():
            raise AdminAlreadyExistsError()
        if self._db is None:
            raise RuntimeError("Supabase client required for admin setup")

        try:
            response = self._db.auth.admin.create_user(
                {
                    "email": email,
                    "password": password,
                    "email_confirm": True,
                    "user_metadata": {"full_name": full_name},
                }
            )
        except AuthError as e:
            raise ExternalServiceError(
                f"Could not create admin user: {e}", service="supabase"
            )
        user_id = str(response.user.id)
        profile = await self._repo.upsert_profile(
            user_id, {"full_name": full_name, "role": Role.ADMIN}
        )
        logger.info(f"First admin created: {user_id}")
        return profile

    async def promote_to_admin(self, user_id: str) -> Profile:
        """Promote an existing user to admin."""
        return await self.update_role(user_id, Role.ADMIN)
