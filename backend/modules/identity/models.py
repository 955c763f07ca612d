"""
Identity module data models.

CurrentUser is derived in memory from a session, a profile and a
subscription. It is never persisted. CurrentUserState is what consumers
read: it may carry a session while the user is still loading.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from modules.auth.models import Session
from modules.billing.entitlement import FREE_PLAN
from modules.billing.models import EntitlementState, Subscription
from modules.profiles.models import Profile, Role


class IdentityStatus(str, Enum):
    """Whether identity resolution has settled."""

    LOADING = "loading"
    READY = "ready"


class CurrentUser(BaseModel):
    """The signed-in user with everything needed for access decisions."""

    session: Session
    profile: Profile
    subscription: Optional[Subscription] = None
    effective_role: Role = Role.GUEST
    can_access_premium: bool = False
    plan_name: str = Field(FREE_PLAN, description="Lower-cased plan name, free when not entitled")
    entitlement: EntitlementState = EntitlementState.NONE

    model_config = {"frozen": True}

    @property
    def user_id(self) -> str:
        return self.session.user_id

    @property
    def email(self) -> str:
        return self.session.email

    @property
    def is_admin(self) -> bool:
        return self.effective_role == Role.ADMIN


class CurrentUserState(BaseModel):
    """
    Snapshot of identity as seen by consumers.

    ``session`` can be set while ``status`` is loading; ``current_user`` is
    only set once ready. Ready without a session means signed out.
    """

    status: IdentityStatus = IdentityStatus.LOADING
    session: Optional[Session] = None
    current_user: Optional[CurrentUser] = None

    model_config = {"frozen": True}

    @property
    def is_loading(self) -> bool:
        return self.status == IdentityStatus.LOADING

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    @classmethod
    def loading(cls, session: Optional[Session] = None) -> "CurrentUserState":
        return cls(status=IdentityStatus.LOADING, session=session)

    @classmethod
    def signed_out(cls) -> "CurrentUserState":
        return cls(status=IdentityStatus.READY)

    @classmethod
    def ready(cls, user: CurrentUser) -> "CurrentUserState":
        return cls(status=IdentityStatus.READY, session=user.session, current_user=user)


class UserSummary(BaseModel):
    """API view of the current user. Tokens are not included."""

    id: str
    email: str
    full_name: Optional[str] = None
    role: Role
    role_label: str
    plan_name: str = FREE_PLAN
    entitlement: EntitlementState
    can_access_premium: bool

    @classmethod
    def from_current_user(cls, user: CurrentUser) -> "UserSummary":
        return cls(
            id=user.user_id,
            email=user.email,
            full_name=user.profile.full_name or user.session.display_name,
            role=user.effective_role,
            role_label=user.effective_role.label,
            plan_name=user.plan_name,
            entitlement=user.entitlement,
            can_access_premium=user.can_access_premium,
        )
