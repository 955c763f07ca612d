"""Pure derivation of a CurrentUser."""

from datetime import datetime
from typing import Optional

from modules.auth.models import Session
from modules.billing.entitlement import effective_plan, entitlement_state, is_entitled
from modules.billing.models import Subscription
from modules.profiles.models import Profile, Role

from .models import CurrentUser


def derive_current_user(
    session: Session,
    profile: Profile,
    subscription: Optional[Subscription],
    now: Optional[datetime] = None,
) -> CurrentUser:
    """
    Combine a session, its profile and its subscription into a CurrentUser.

    The profile's role is already normalized when the row is parsed, so
    the effective role is simply ``profile.role``. Admins can always reach
    premium content; everyone else needs an entitled subscription.
    Without one the plan is ``free``.
    """
    role = profile.role
    return CurrentUser(
        session=session,
        profile=profile,
        subscription=subscription,
        effective_role=role,
        can_access_premium=role == Role.ADMIN or is_entitled(subscription, now),
        plan_name=effective_plan(subscription, now),
        entitlement=entitlement_state(subscription, now),
    )
