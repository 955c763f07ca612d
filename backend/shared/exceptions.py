"""
Error hierarchy shared by every ProspectGenius module.

Modules subclass these for their own failures. The API layer maps the
bases onto HTTP statuses; the profile and subscription resolvers catch
store failures and fall back to guest defaults rather than surfacing them.
"""

from typing import Optional, Any


class ProspectError(Exception):
    """Root of all application errors; carries a stable ``code`` for clients."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Error body in the ``{error, message, details}`` shape the API returns."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(ProspectError):
    """A profile, plan or subscription row is missing."""


class ValidationError(ProspectError):
    """Caller supplied a value the domain rejects."""


class ConflictError(ProspectError):
    """The write would duplicate state that already exists."""


class AuthenticationError(ProspectError):
    """No usable session: token missing, malformed or expired."""


class AuthorizationError(ProspectError):
    """Signed in, but the entitlement gate said no."""


class ExternalServiceError(ProspectError):
    """
    Supabase (or the network in front of it) failed.

    ``service`` is copied into ``details`` so the client can tell which
    backend was at fault.
    """

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
