"""
Entitlement derivation.

Pure functions over a Subscription and a point in time. A subscription
stored as active but past its end date is expired, whatever its status
column says.
"""

from datetime import datetime, timezone
from typing import Optional

from .models import EntitlementState, Subscription, SubscriptionStatus

FREE_PLAN = "free"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_entitled(subscription: Optional[Subscription], now: Optional[datetime] = None) -> bool:
    """
    Whether a subscription grants premium access at ``now``.

    Args:
        subscription: The user's current subscription, or None
        now: Evaluation time (defaults to the current UTC time)

    Returns:
        True only for an active subscription with no end date or an end
        date not before ``now``
    """
    if subscription is None:
        return False
    if subscription.status != SubscriptionStatus.ACTIVE:
        return False
    if subscription.end_date is None:
        return True
    return as_utc(subscription.end_date) >= as_utc(now or utcnow())


def entitlement_state(
    subscription: Optional[Subscription],
    now: Optional[datetime] = None,
) -> EntitlementState:
    """Normalize a subscription into an EntitlementState at ``now``."""
    if subscription is None:
        return EntitlementState.NONE
    if subscription.status == SubscriptionStatus.ACTIVE:
        if is_entitled(subscription, now):
            return EntitlementState.ACTIVE
        return EntitlementState.EXPIRED
    if subscription.status == SubscriptionStatus.CANCELED:
        return EntitlementState.CANCELED
    if subscription.status == SubscriptionStatus.PAST_DUE:
        return EntitlementState.PAST_DUE
    return EntitlementState.NONE


def plan_name_of(subscription: Optional[Subscription]) -> Optional[str]:
    """Lower-cased name of the subscription's embedded plan, if any."""
    if subscription is None or subscription.plan is None:
        return None
    name = subscription.plan.name.strip().lower()
    return name or None


def effective_plan(subscription: Optional[Subscription], now: Optional[datetime] = None) -> str:
    """
    Plan name used for access decisions at ``now``.

    Only an entitled subscription contributes its plan. Everyone else,
    including expired and canceled subscribers, is on the free plan.
    """
    if not is_entitled(subscription, now):
        return FREE_PLAN
    return plan_name_of(subscription) or FREE_PLAN
