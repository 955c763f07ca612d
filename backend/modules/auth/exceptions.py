"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Any, Optional

from shared.exceptions import AuthenticationError, AuthorizationError


class InvalidTokenError(AuthenticationError):
    """Raised when a JWT token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a JWT token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class SignInError(AuthenticationError):
    """Raised when Supabase rejects a sign-in attempt."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="SIGN_IN_FAILED")


class InsufficientPermissionsError(AuthorizationError):
    """Raised when the user's role or plan doesn't meet a requirement."""

    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            reason or "Access denied",
            code="INSUFFICIENT_PERMISSIONS",
            details=details,
        )
