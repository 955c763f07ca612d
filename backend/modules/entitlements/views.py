"""
Denial view.

The default explanation shown when a guard denies access. Rendering it
(HTML, JSON, a terminal) is up to the caller.
"""

from typing import Optional

from pydantic import BaseModel

from modules.billing.entitlement import FREE_PLAN
from modules.profiles.models import Role

from .models import Decision, DecisionOutcome


def role_label(value: str) -> str:
    try:
        return Role(value).label
    except ValueError:
        return value.title()


class DenialView(BaseModel):
    """Content of the access-denied screen."""

    title: str
    message: str
    current_role: Optional[str] = None
    required_roles: Optional[str] = None
    current_plan: Optional[str] = None
    required_plans: Optional[str] = None
    show_upgrade: bool = False
    upgrade_label: Optional[str] = None
    upgrade_path: Optional[str] = None

    @classmethod
    def from_decision(cls, decision: Decision, upgrade_path: str) -> "DenialView":
        """
        Build the view for a DENY decision.

        Upgrading is offered to guests, and to anyone who failed a plan or
        premium requirement.
        """
        if decision.outcome != DecisionOutcome.DENY:
            raise ValueError(f"No denial to explain for outcome {decision.outcome.value}")

        plan_failed = "plan" in decision.unmet or "premium" in decision.unmet
        show_upgrade = decision.current_role == Role.GUEST or plan_failed

        if plan_failed and "role" not in decision.unmet:
            title = "Access Restricted"
            message = "This feature is not available for your current plan."
        else:
            title = "Access Denied"
            message = "You don't have sufficient permissions to access this page."

        required_plans = None
        if decision.required_plans:
            required_plans = " or ".join(p.title() for p in decision.required_plans)
        elif decision.premium_required:
            required_plans = "Any active plan"

        return cls(
            title=title,
            message=message,
            current_role=decision.current_role.label if decision.current_role else None,
            required_roles=(
                " or ".join(role_label(r) for r in decision.required_roles)
                if decision.required_roles
                else None
            ),
            current_plan=(decision.current_plan or FREE_PLAN).title(),
            required_plans=required_plans,
            show_upgrade=show_upgrade,
            upgrade_label="Upgrade Plan" if show_upgrade else None,
            upgrade_path=upgrade_path if show_upgrade else None,
        )
