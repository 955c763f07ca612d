"""
Entitlement guards for API routes.

The server-side counterpart of the route guards: the same gate decides,
and the outcome becomes a 401, a 403 or the resolved CurrentUser.

Usage:
    @router.get("/reports")
    async def reports(user: CurrentUser = Depends(require_premium)):
        ...
"""

import logging
from typing import Any, Iterable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials

from modules.auth.exceptions import InsufficientPermissionsError
from modules.auth.interfaces import ISessionProvider
from modules.entitlements.gate import evaluate
from modules.entitlements.guards import sign_in_url
from modules.entitlements.models import Requirement
from modules.entitlements.views import DenialView
from modules.identity.models import CurrentUser, CurrentUserState
from modules.identity.service import IdentityService
from modules.profiles.models import Role
from shared.config import get_settings

from ..dependencies import get_identity_service, get_session_provider
from .auth import AuthError, bearer_scheme, decode_session

logger = logging.getLogger(__name__)


class RequireEntitlement:
    """
    FastAPI dependency that admits only users meeting a Requirement.

    Responses:
        401 with ``{"redirect": <sign-in>?next=<path>}`` when not signed in
        403 with the DenialView when signed in but not entitled
    """

    def __init__(
        self,
        roles: Optional[Iterable[Any]] = None,
        plans: Optional[Iterable[str]] = None,
        premium: bool = False,
    ):
        self.requirement = Requirement.of(roles=roles, plans=plans, premium=premium)

    async def __call__(
        self,
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        provider: ISessionProvider = Depends(get_session_provider),
        identity: IdentityService = Depends(get_identity_service),
    ) -> CurrentUser:
        if credentials is None:
            raise self._unauthenticated(request, "Missing authorization header")
        try:
            session = decode_session(provider, credentials.credentials)
        except AuthError as e:
            raise self._unauthenticated(request, e.detail)

        user = await identity.resolve(session)
        decision = evaluate(CurrentUserState.ready(user), self.requirement)
        if decision.allowed:
            return user

        logger.info(f"Access denied for {user.user_id} on {request.url.path}: {decision.reason}")
        error = InsufficientPermissionsError(
            decision.reason,
            details={
                "current_role": user.effective_role.value,
                "required_roles": decision.required_roles,
                "required_plans": decision.required_plans,
            },
        )
        view = DenialView.from_decision(decision, get_settings().pricing_path)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={**error.to_dict(), "view": view.model_dump()},
        )

    @staticmethod
    def _unauthenticated(request: Request, message: str) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": message, "redirect": sign_in_url(request.url.path)},
            headers={"WWW-Authenticate": "Bearer"},
        )


require_admin = RequireEntitlement(roles=[Role.ADMIN])
require_subscriber = RequireEntitlement(roles=[Role.ADMIN, Role.SUBSCRIBER])
require_premium = RequireEntitlement(premium=True)
