"""
Session provider implementation.

Wraps Supabase Auth: password sign-in, sign-out, session change events,
and validation of Supabase JWTs presented to the API.
"""

import logging
from typing import Optional

import jwt
from supabase import AuthError, Client

from shared.config import get_settings
from shared.database import get_supabase_auth_client

from .interfaces import ISessionProvider, SessionCallback, Unsubscribe
from .models import JWTPayload, Session
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    SignInError,
)

logger = logging.getLogger(__name__)


class SupabaseSessionProvider(ISessionProvider):
    """
    Session provider backed by Supabase Auth.

    The Supabase client is created lazily so that token validation works
    without a configured Supabase URL (the API only needs the JWT secret).
    """

    def __init__(self, client: Optional[Client] = None):
        self._settings = get_settings()
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_auth_client()
        return self._client

    def get_session(self) -> Optional[Session]:
        """Get the current session from the Supabase client."""
        raw = self.client.auth.get_session()
        if raw is None or raw.user is None:
            return None
        return Session.from_supabase(raw)

    def on_session_change(self, callback: SessionCallback) -> Unsubscribe:
        """
        Forward Supabase auth state changes as Session objects.

        Supabase invokes listeners synchronously in emit order, so the
        order of sign-in, refresh and sign-out events is preserved.
        """

        def _listener(event: str, raw_session) -> None:
            logger.debug(f"Auth state change: {event}")
            if raw_session is None or raw_session.user is None:
                callback(None)
            else:
                callback(Session.from_supabase(raw_session))

        subscription = self.client.auth.on_auth_state_change(_listener)
        return subscription.unsubscribe

    def sign_in_with_password(self, email: str, password: str) -> Session:
        """Sign in with email and password."""
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as e:
            logger.info(f"Sign-in rejected for {email}")
            raise SignInError(str(e) or "Invalid email or password")

        if response.session is None:
            # Email confirmation pending
            raise SignInError("Email address has not been confirmed")

        return Session.from_supabase(response.session)

    def sign_out(self) -> None:
        """Sign out of Supabase Auth."""
        self.client.auth.sign_out()

    def validate_token(self, token: str) -> Session:
        """
        Validate a JWT token and return the session it represents.

        This implementation validates Supabase JWTs using the JWT secret.
        """
        if not token:
            raise MissingTokenError()

        if not self._settings.supabase_jwt_secret:
            raise InvalidTokenError("Server authentication not configured")

        try:
            payload = jwt.decode(
                token,
                self._settings.supabase_jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        return Session.from_jwt(token, JWTPayload(**payload))


# Module-level instance getter
_service_instance: Optional[SupabaseSessionProvider] = None


def get_session_provider() -> SupabaseSessionProvider:
    """Get the session provider singleton."""
    global _service_instance
    if _service_instance is None:
        _service_instance = SupabaseSessionProvider()
    return _service_instance


def reset_session_provider() -> None:
    """Reset the session provider singleton (for testing)."""
    global _service_instance
    _service_instance = None
