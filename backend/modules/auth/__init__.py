"""
Authentication module.

Owns the session lifecycle: password sign-in, sign-out, session change
events, and JWT validation for API requests.

Public API:
- ISessionProvider: Interface for session operations
- Session: A live authenticated identity handle
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import ISessionProvider
from .models import Session, JWTPayload
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    SignInError,
    InsufficientPermissionsError,
)

__all__ = [
    # Interface
    "ISessionProvider",
    # Models
    "Session",
    "JWTPayload",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "SignInError",
    "InsufficientPermissionsError",
]
