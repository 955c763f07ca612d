"""
Identity module.

Combines a live session with its profile and subscription into the
CurrentUser that access decisions are made on.

Public API:
- IdentityService: One-shot resolution (used per API request)
- IdentityAggregate: Long-lived, push-based store of CurrentUserState
- derive_current_user: Pure derivation
- IIdentitySource: Observable state interface guards depend on
"""

from .models import CurrentUser, CurrentUserState, IdentityStatus, UserSummary
from .derive import derive_current_user
from .interfaces import IIdentitySource, StateListener
from .service import IdentityService
from .aggregate import IdentityAggregate

__all__ = [
    # Models
    "CurrentUser",
    "CurrentUserState",
    "IdentityStatus",
    "UserSummary",
    # Derivation
    "derive_current_user",
    # Interfaces
    "IIdentitySource",
    "StateListener",
    # Implementations
    "IdentityService",
    "IdentityAggregate",
]
