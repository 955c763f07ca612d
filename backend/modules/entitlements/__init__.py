"""
Entitlements module.

Decides whether the current identity may see a route or region, and what
to show when it may not.

Public API:
- Requirement / Decision / DecisionOutcome: Gate inputs and outputs
- evaluate: The pure entitlement gate
- Guard / GuardController / GuardState: Route and component guards
- DenialView: Default access-denied content
- INavigator: Navigation interface for guard redirects
"""

from .models import Decision, DecisionOutcome, Requirement
from .gate import evaluate
from .views import DenialView
from .interfaces import INavigator
from .guards import (
    Guard,
    GuardController,
    GuardState,
    LoadingPlaceholder,
    Redirect,
    guard_state_for,
    sign_in_url,
)

__all__ = [
    # Models
    "Decision",
    "DecisionOutcome",
    "Requirement",
    # Gate
    "evaluate",
    # Guards
    "Guard",
    "GuardController",
    "GuardState",
    "LoadingPlaceholder",
    "Redirect",
    "guard_state_for",
    "sign_in_url",
    "DenialView",
    "INavigator",
]
