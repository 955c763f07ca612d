"""
Billing module.

Plan catalog, subscriptions, and the entitlement derived from them.

Public API:
- IBillingService: Interface for plan and subscription operations
- ISubscriptionStore: Interface for subscription data access
- SubscriptionResolver: Resolves a user's current subscription
- is_entitled / entitlement_state: Pure entitlement derivation
- Billing exceptions: PlanNotFoundError, AlreadySubscribedError, etc.
"""

from .interfaces import IBillingService, ISubscriptionStore
from .models import (
    EntitlementState,
    Plan,
    PlanCreate,
    PlanUpdate,
    SubscribeRequest,
    Subscription,
    SubscriptionResponse,
    SubscriptionStatus,
    SubscriptionStatusResponse,
)
from .entitlement import entitlement_state, is_entitled, plan_name_of
from .resolver import SubscriptionResolver
from .exceptions import (
    AlreadySubscribedError,
    BillingError,
    InactivePlanError,
    PlanNotFoundError,
    SubscriptionNotFoundError,
)

__all__ = [
    # Interfaces
    "IBillingService",
    "ISubscriptionStore",
    "SubscriptionResolver",
    # Models
    "EntitlementState",
    "Plan",
    "PlanCreate",
    "PlanUpdate",
    "SubscribeRequest",
    "Subscription",
    "SubscriptionResponse",
    "SubscriptionStatus",
    "SubscriptionStatusResponse",
    # Entitlement
    "entitlement_state",
    "is_entitled",
    "plan_name_of",
    # Exceptions
    "AlreadySubscribedError",
    "BillingError",
    "InactivePlanError",
    "PlanNotFoundError",
    "SubscriptionNotFoundError",
]
