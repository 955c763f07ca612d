"""
User-related endpoints.

The current user's resolved identity and ad-hoc access checks.
"""

from fastapi import APIRouter, Depends, Query

from modules.entitlements.gate import evaluate
from modules.entitlements.models import Decision, Requirement
from modules.identity.models import CurrentUser, CurrentUserState, UserSummary
from ..middleware.auth import get_current_user

router = APIRouter()


def _split(values: list[str]) -> list[str]:
    # Accept both ?roles=a&roles=b and ?roles=a,b
    return [part for value in values for part in value.split(",") if part.strip()]


@router.get("/me", response_model=UserSummary)
async def get_me(
    user: CurrentUser = Depends(get_current_user),
) -> UserSummary:
    """
    Get the current user's role, plan and premium access.

    Requires authentication.
    """
    return UserSummary.from_current_user(user)


@router.get("/me/access", response_model=Decision)
async def check_access(
    roles: list[str] = Query(default=[], description="Allowed roles"),
    plans: list[str] = Query(default=[], description="Allowed plan names"),
    premium: bool = Query(default=False, description="Require premium access"),
    user: CurrentUser = Depends(get_current_user),
) -> Decision:
    """
    Evaluate a requirement for the current user without enforcing it.

    Lets clients ask "may I show this?" before rendering a region.
    """
    requirement = Requirement.of(roles=_split(roles), plans=_split(plans), premium=premium)
    return evaluate(CurrentUserState.ready(user), requirement)
