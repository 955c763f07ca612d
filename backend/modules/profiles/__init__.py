"""
Profiles module.

Per-user role records: lazy creation on first login, guest fallback when
the store is unreachable, admin role management.

Public API:
- IProfileStore: Interface for profile data access
- ProfileResolver: Resolves a session's profile
- Profile, Role: Profile model and permission tiers
- Profile exceptions: ProfileNotFoundError, ProfileConflictError, etc.
"""

from .interfaces import IProfileStore
from .models import (
    Profile,
    ProfileStats,
    ProfileUpdate,
    Role,
    RoleUpdate,
    ROLE_LABELS,
    normalize_role,
    resolve_role,
)
from .resolver import ProfileResolver
from .exceptions import (
    AdminAlreadyExistsError,
    InvalidRoleError,
    ProfileConflictError,
    ProfileNotFoundError,
    SelfDeletionError,
)

__all__ = [
    # Interface
    "IProfileStore",
    "ProfileResolver",
    # Models
    "Profile",
    "ProfileStats",
    "ProfileUpdate",
    "Role",
    "RoleUpdate",
    "ROLE_LABELS",
    "normalize_role",
    "resolve_role",
    # Exceptions
    "AdminAlreadyExistsError",
    "InvalidRoleError",
    "ProfileConflictError",
    "ProfileNotFoundError",
    "SelfDeletionError",
]
