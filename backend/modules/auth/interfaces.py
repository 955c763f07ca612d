"""
Authentication module interface.

Other modules should depend on ISessionProvider, not the concrete implementation.
This keeps the identity aggregate testable with an in-memory provider.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

from .models import Session

SessionCallback = Callable[[Optional[Session]], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class ISessionProvider(Protocol):
    """
    Interface for session lifecycle operations.

    The provider owns sign-in, sign-out and token refresh. Consumers only
    ever read the session it hands out.
    """

    def get_session(self) -> Optional[Session]:
        """
        Get the current session.

        Returns:
            The live session, or None when nobody is signed in
        """
        ...

    def on_session_change(self, callback: SessionCallback) -> Unsubscribe:
        """
        Register a callback for session changes.

        The callback receives the new session (None on sign-out) in the
        order the provider delivers events.

        Returns:
            A callable that removes the callback
        """
        ...

    def sign_in_with_password(self, email: str, password: str) -> Session:
        """
        Sign in with email and password.

        Raises:
            SignInError: If the credentials are rejected
        """
        ...

    def sign_out(self) -> None:
        """End the current session."""
        ...

    def validate_token(self, token: str) -> Session:
        """
        Validate a JWT access token and return the session it represents.

        Raises:
            MissingTokenError: If no token was given
            ExpiredTokenError: If the token has expired
            InvalidTokenError: If the token is malformed or wrongly signed
        """
        ...
