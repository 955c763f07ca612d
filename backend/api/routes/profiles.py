"""
Profile endpoints.

Self-service profile access, and admin management of all profiles.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from modules.identity.models import CurrentUser
from modules.profiles.models import Profile, ProfileStats, ProfileUpdate, Role, RoleUpdate
from modules.profiles.service import ProfileService
from modules.profiles.exceptions import (
    InvalidRoleError,
    ProfileNotFoundError,
    SelfDeletionError,
)

from ..dependencies import get_profile_service
from ..middleware.auth import get_current_user
from ..middleware.guards import require_admin

router = APIRouter()


@router.get("/profile", response_model=Profile)
async def get_own_profile(
    user: CurrentUser = Depends(get_current_user),
) -> Profile:
    """Get the caller's profile (created as guest on first access)."""
    return user.profile


@router.patch("/profile", response_model=Profile)
async def update_own_profile(
    request: ProfileUpdate,
    user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> Profile:
    """Update the caller's display name. Roles can't be changed here."""
    return await service.update_own_profile(user.user_id, request.full_name)


@router.get("/profiles", response_model=list[Profile])
async def list_profiles(
    role: Optional[Role] = Query(default=None, description="Filter by role"),
    admin: CurrentUser = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
) -> list[Profile]:
    """List all profiles, newest first. Admin only."""
    return await service.list_profiles(role)


@router.patch("/profiles/{user_id}/role", response_model=Profile)
async def update_role(
    user_id: str,
    request: RoleUpdate,
    admin: CurrentUser = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
) -> Profile:
    """Change a user's role. Admin only."""
    try:
        return await service.update_role(user_id, request.role)
    except InvalidRoleError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail="Profile not found")


@router.delete("/profiles/{user_id}", status_code=204)
async def delete_profile(
    user_id: str,
    admin: CurrentUser = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
) -> None:
    """Delete a user's profile. Admins can't delete themselves."""
    try:
        await service.delete_profile(admin.user_id, user_id)
    except SelfDeletionError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail="Profile not found")


@router.get("/stats", response_model=ProfileStats)
async def get_stats(
    admin: CurrentUser = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileStats:
    """Profile counts per role. Admin only."""
    return await service.get_stats()
