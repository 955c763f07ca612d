"""
JWT Authentication middleware.

Validates Supabase JWT tokens and resolves the CurrentUser behind them.
"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from modules.auth.interfaces import ISessionProvider
from modules.auth.models import Session
from modules.auth.exceptions import (
    ExpiredTokenError,
    InvalidTokenError,
    MissingTokenError,
)
from modules.identity.models import CurrentUser
from modules.identity.service import IdentityService

from ..dependencies import get_identity_service, get_session_provider

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


class AuthError(HTTPException):
    """Authentication error with consistent format."""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def decode_session(provider: ISessionProvider, token: str) -> Session:
    """
    Validate a bearer token through the session provider.

    Raises:
        AuthError: If the token is missing, invalid or expired
    """
    try:
        return provider.validate_token(token)
    except MissingTokenError:
        raise AuthError("Missing authorization header")
    except ExpiredTokenError:
        raise AuthError("Token has expired")
    except InvalidTokenError as e:
        raise AuthError(e.message)


async def get_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    provider: ISessionProvider = Depends(get_session_provider),
) -> Session:
    """Dependency that requires a valid bearer token."""
    if credentials is None:
        raise AuthError("Missing authorization header")

    return decode_session(provider, credentials.credentials)


async def get_current_user(
    session: Session = Depends(get_session),
    identity: IdentityService = Depends(get_identity_service),
) -> CurrentUser:
    """
    Dependency that requires authentication.

    Resolves the profile and subscription behind the token. A profile
    store outage yields a guest, a subscription outage yields no plan.

    Usage:
        @router.get("/protected")
        async def protected_route(user: CurrentUser = Depends(get_current_user)):
            return {"user_id": user.user_id}
    """
    return await identity.resolve(session)
