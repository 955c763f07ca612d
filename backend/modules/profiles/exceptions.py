"""
Profile module exceptions.

Raised by the profile store and admin service. The profile resolver
catches them and falls back to a guest profile instead.
"""

from shared.exceptions import ConflictError, NotFoundError, ValidationError


class ProfileNotFoundError(NotFoundError):
    """Raised when a profile doesn't exist."""

    def __init__(self, user_id: str):
        super().__init__(
            f"Profile not found: {user_id}",
            code="PROFILE_NOT_FOUND",
            details={"user_id": user_id},
        )


class ProfileConflictError(ConflictError):
    """Raised when inserting a profile whose id already exists."""

    def __init__(self, user_id: str):
        super().__init__(
            f"Profile already exists: {user_id}",
            code="PROFILE_CONFLICT",
            details={"user_id": user_id},
        )


class InvalidRoleError(ValidationError):
    """Raised when a role value is not one of guest, subscriber, admin."""

    def __init__(self, role: str):
        super().__init__(
            f"Invalid role: {role}",
            code="INVALID_ROLE",
            details={"role": role},
        )


class SelfDeletionError(ValidationError):
    """Raised when an admin tries to delete their own profile."""

    def __init__(self):
        super().__init__(
            "Cannot delete your own profile",
            code="SELF_DELETION",
        )


class AdminAlreadyExistsError(ConflictError):
    """Raised by first-admin setup when an admin is already present."""

    def __init__(self):
        super().__init__(
            "Admin user already exists, skipping setup",
            code="ADMIN_EXISTS",
        )
