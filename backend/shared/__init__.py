"""
Shared infrastructure for the ProspectGenius backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- repository: Base class for Supabase repositories

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, get_supabase_auth_client, reset_client_cache
from .exceptions import (
    ProspectError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
)

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "get_supabase_auth_client",
    "reset_client_cache",
    "ProspectError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
]
