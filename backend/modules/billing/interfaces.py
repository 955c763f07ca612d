"""
Billing module interfaces.

The subscription resolver depends on ISubscriptionStore; routes depend on
IBillingService. Neither knows about Supabase.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import (
    Plan,
    PlanCreate,
    PlanUpdate,
    Subscription,
    SubscriptionStatusResponse,
)


@runtime_checkable
class ISubscriptionStore(Protocol):
    """Data access needed to resolve subscription state."""

    async def fetch_current_subscription(self, user_id: str) -> Optional[Subscription]:
        """
        Get the user's most recently created subscription.

        Returns:
            The subscription with its plan embedded, or None if the user
            never subscribed
        """
        ...

    async def fetch_plans(self) -> list[Plan]:
        """
        Get the active plan catalog.

        Returns:
            Active plans ordered by price, cheapest first
        """
        ...


@runtime_checkable
class IBillingService(Protocol):
    """
    Interface for plan catalog and subscription operations.

    Subscribing promotes the user to subscriber, canceling demotes them
    to guest. Admin roles are left alone.
    """

    async def list_plans(self) -> list[Plan]:
        """Get the active plan catalog."""
        ...

    async def get_plan(self, plan_id: str) -> Plan:
        """
        Get a plan by ID.

        Raises:
            PlanNotFoundError: If it doesn't exist
        """
        ...

    async def create_plan(self, request: PlanCreate) -> Plan:
        """Add a plan to the catalog."""
        ...

    async def update_plan(self, plan_id: str, request: PlanUpdate) -> Plan:
        """
        Update a plan.

        Raises:
            PlanNotFoundError: If it doesn't exist
        """
        ...

    async def get_current_subscription(self, user_id: str) -> Optional[Subscription]:
        """Get the user's current subscription, or None."""
        ...

    async def subscribe(self, user_id: str, plan_id: str) -> Subscription:
        """
        Subscribe a user to a plan.

        Raises:
            PlanNotFoundError: If the plan doesn't exist
            InactivePlanError: If the plan is not offered anymore
            AlreadySubscribedError: If the user is already entitled
        """
        ...

    async def cancel(self, user_id: str) -> Subscription:
        """
        Cancel the user's subscription, ending access now.

        Raises:
            SubscriptionNotFoundError: If there is nothing to cancel
        """
        ...

    async def get_status(self, user_id: str) -> SubscriptionStatusResponse:
        """Get the user's entitlement status."""
        ...

    async def list_subscriptions(self) -> list[Subscription]:
        """Get all subscriptions, newest first."""
        ...
