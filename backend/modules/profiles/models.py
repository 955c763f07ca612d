"""
Profile module data models.

A profile is the per-user application record holding the user's role.
Rows are normalized here, when they are parsed, so nothing downstream
ever branches on the stored shape.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Coarse permission tiers, lowest first."""

    GUEST = "guest"
    SUBSCRIBER = "subscriber"
    ADMIN = "admin"

    @property
    def label(self) -> str:
        return ROLE_LABELS[self]


ROLE_LABELS = {
    Role.ADMIN: "Administrator",
    Role.SUBSCRIBER: "Subscriber",
    Role.GUEST: "Guest",
}


def normalize_role(value: Any) -> Optional[Role]:
    """
    Normalize a stored role value.

    Returns None for empty values so callers can fall through to another
    source. Unknown values degrade to guest rather than failing.
    """
    if value is None:
        return None
    text = str(value.value if isinstance(value, Role) else value).strip().lower()
    if not text:
        return None
    try:
        return Role(text)
    except ValueError:
        logger.warning(f"Unknown role value {value!r}, treating as guest")
        return Role.GUEST


def resolve_role(record: Mapping[str, Any]) -> Role:
    """
    Resolve the role of a stored profile record.

    Precedence: the flat ``role`` column, then the legacy nested
    ``profile.role`` shape, then guest.
    """
    flat = normalize_role(record.get("role"))

    nested_role = None
    nested = record.get("profile")
    if isinstance(nested, Mapping):
        nested_role = normalize_role(nested.get("role"))

    if nested_role is not None:
        if flat is None:
            logger.warning(
                f"Profile {record.get('id')} uses the legacy nested role shape"
            )
        elif flat != nested_role:
            logger.warning(
                f"Profile {record.get('id')} has conflicting roles "
                f"(flat={flat.value}, nested={nested_role.value}); using flat"
            )

    return flat or nested_role or Role.GUEST


class Profile(BaseModel):
    """Per-user application metadata."""

    id: str = Field(..., description="User ID (same as the auth user)")
    full_name: Optional[str] = Field(None, description="Display name")
    role: Role = Field(default=Role.GUEST, description="Permission tier")
    created_at: Optional[datetime] = Field(None, description="Creation time")
    updated_at: Optional[datetime] = Field(None, description="Last update time")

    model_config = {"frozen": True, "extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def _normalize_role_shape(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            data = dict(data)
            data["role"] = resolve_role(data)
            data.pop("profile", None)
        return data

    @classmethod
    def guest(cls, user_id: str) -> "Profile":
        """Synthetic profile used when the profile store is unreachable."""
        return cls(id=user_id, role=Role.GUEST)


class ProfileUpdate(BaseModel):
    """Self-service profile update. Users cannot change their own role."""

    full_name: Optional[str] = Field(None, max_length=200)


class RoleUpdate(BaseModel):
    """Admin role change request."""

    role: Role

    @field_validator("role", mode="before")
    @classmethod
    def _lowercase(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class ProfileStats(BaseModel):
    """Profile counts per role."""

    total: int = 0
    admin: int = 0
    subscriber: int = 0
    guest: int = 0
