"""
Entitlement gate.

Pure evaluation of a Requirement against a CurrentUserState. No I/O and
no side effects: guards decide what to do with the Decision.
"""

from datetime import datetime
from typing import Optional

from modules.billing.entitlement import effective_plan, is_entitled
from modules.identity.models import CurrentUserState
from modules.profiles.models import ROLE_LABELS, Role

from .models import Decision, DecisionOutcome, Requirement


def evaluate(
    state: CurrentUserState,
    requirement: Optional[Requirement] = None,
    now: Optional[datetime] = None,
) -> Decision:
    """
    Decide whether the identity in ``state`` meets ``requirement``.

    Loading always yields PENDING and a signed-out state always yields
    UNAUTHENTICATED, whatever the requirement. Admins satisfy plan and
    premium parts, but a role part must list admin to admit one.
    A plan only counts while its subscription is entitled at ``now``;
    otherwise the user is on the free plan.
    """
    requirement = requirement or Requirement()
    required = dict(
        required_roles=sorted(requirement.allowed_roles),
        required_plans=sorted(requirement.allowed_plans),
        premium_required=requirement.premium,
    )

    if state.is_loading:
        return Decision(
            outcome=DecisionOutcome.PENDING,
            reason="Identity is still loading",
            **required,
        )

    user = state.current_user
    if state.session is None or user is None:
        return Decision(
            outcome=DecisionOutcome.UNAUTHENTICATED,
            reason="Sign in required",
            **required,
        )

    role = user.effective_role
    is_admin = role == Role.ADMIN
    entitled = is_entitled(user.subscription, now)
    current_plan = effective_plan(user.subscription, now)

    unmet = []
    reasons = []
    if requirement.allowed_roles and role.value not in requirement.allowed_roles:
        unmet.append("role")
        reasons.append(f"requires role {_role_list(requirement.allowed_roles)}")
    if (
        requirement.allowed_plans
        and not is_admin
        and current_plan not in requirement.allowed_plans
    ):
        unmet.append("plan")
        reasons.append(f"requires plan {' or '.join(sorted(requirement.allowed_plans))}")
    if requirement.premium and not (is_admin or entitled):
        unmet.append("premium")
        reasons.append("requires an active subscription")

    if unmet:
        return Decision(
            outcome=DecisionOutcome.DENY,
            reason="Access " + "; ".join(reasons),
            current_role=role,
            current_plan=current_plan,
            unmet=unmet,
            **required,
        )

    return Decision(
        outcome=DecisionOutcome.ALLOW,
        current_role=role,
        current_plan=current_plan,
        **required,
    )


def _role_list(roles) -> str:
    labels = []
    for value in sorted(roles):
        try:
            labels.append(ROLE_LABELS[Role(value)])
        except ValueError:
            labels.append(value)
    return " or ".join(labels)
