"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from pydantic import BaseModel, Field


class JWTPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    This matches the structure of Supabase Auth JWTs.
    """

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User's email")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")
    role: str = Field(default="authenticated", description="Postgres role claim")

    # Supabase-specific claims
    app_metadata: dict = Field(default_factory=dict)
    user_metadata: dict = Field(default_factory=dict)


class Session(BaseModel):
    """
    A live authenticated identity handle issued by Supabase Auth.

    Only the session provider creates these. Everything downstream reads
    the user id, email and metadata and never stores the token.
    """

    user_id: str = Field(..., description="User ID (UUID from Supabase)")
    email: str = Field(default="", description="User's email address")
    access_token: str = Field(default="", repr=False, description="Bearer token")
    issued_at: Optional[datetime] = Field(None, description="Token issue time")
    expires_at: Optional[datetime] = Field(None, description="Token expiry time")
    user_metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}  # Make immutable for safety

    @property
    def display_name(self) -> Optional[str]:
        """Display name captured at sign-up, if any."""
        name = self.user_metadata.get("full_name") or self.user_metadata.get("name")
        return name or None

    @classmethod
    def from_jwt(cls, token: str, payload: JWTPayload) -> "Session":
        """Build a session from a validated access token."""
        return cls(
            user_id=payload.sub,
            email=payload.email or "",
            access_token=token,
            issued_at=datetime.fromtimestamp(payload.iat, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload.exp, tz=timezone.utc),
            user_metadata=payload.user_metadata,
        )

    @classmethod
    def from_supabase(cls, session: Any) -> "Session":
        """Build a session from a supabase-py (gotrue) session object."""
        user = session.user
        expires_at = None
        if getattr(session, "expires_at", None):
            expires_at = datetime.fromtimestamp(session.expires_at, tz=timezone.utc)
        return cls(
            user_id=str(user.id),
            email=user.email or "",
            access_token=session.access_token,
            expires_at=expires_at,
            user_metadata=dict(user.user_metadata or {}),
        )
