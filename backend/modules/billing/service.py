"""
Billing service implementation with Supabase.

Plan catalog management and the subscribe/cancel lifecycle. Payment
collection happens outside this service; a subscription is created
active as soon as the user subscribes.
"""

import logging
from typing import Optional

from modules.profiles.models import Role
from modules.profiles.repository import ProfileRepository

from .interfaces import IBillingService
from .repository import SubscriptionRepository
from .entitlement import entitlement_state, is_entitled, utcnow
from .models import (
    Plan,
    PlanCreate,
    PlanUpdate,
    Subscription,
    SubscriptionStatus,
    SubscriptionStatusResponse,
)
from .exceptions import (
    AlreadySubscribedError,
    InactivePlanError,
    PlanNotFoundError,
    SubscriptionNotFoundError,
)

logger = logging.getLogger(__name__)


class BillingService(IBillingService):
    """
    Billing service with Supabase backend.

    Keeps the profile role in step with the subscription: subscribing
    makes a guest a subscriber, canceling makes a subscriber a guest.
    """

    def __init__(
        self,
        repository: SubscriptionRepository,
        profiles: ProfileRepository,
    ):
        self._repo = repository
        self._profiles = profiles

    async def list_plans(self) -> list[Plan]:
        """Get the active plan catalog."""
        return await self._repo.fetch_plans()

    async def get_plan(self, plan_id: str) -> Plan:
        """Get a plan by ID."""
        plan = await self._repo.fetch_plan(plan_id)
        if plan is None:
            raise PlanNotFoundError(plan_id)
        return plan

    async def create_plan(self, request: PlanCreate) -> Plan:
        """Add a plan to the catalog."""
        plan = await self._repo.create_plan(request.model_dump())
        logger.info(f"Plan created: {plan.name} ({plan.id})")
        return plan

    async def update_plan(self, plan_id: str, request: PlanUpdate) -> Plan:
        """Update only the fields set on the request."""
        changes = request.model_dump(exclude_unset=True)
        if not changes:
            return await self.get_plan(plan_id)
        return await self._repo.update_plan(plan_id, changes)

    async def get_current_subscription(self, user_id: str) -> Optional[Subscription]:
        return await self._repo.fetch_current_subscription(user_id)

    async def subscribe(self, user_id: str, plan_id: str) -> Subscription:
        """
        Subscribe a user to a plan.

        Reactivates the user's existing subscription row when there is
        one, otherwise creates a new row.
        """
        plan = await self.get_plan(plan_id)
        if not plan.is_active:
            raise InactivePlanError(plan_id)

        existing = await self._repo.fetch_current_subscription(user_id)
        if is_entitled(existing):
            raise AlreadySubscribedError(user_id)

        data = {
            "user_id": user_id,
            "plan_id": plan.id,
            "status": SubscriptionStatus.ACTIVE,
            "start_date": utcnow(),
            "end_date": None,
            "external_subscription_id": None,
        }

        if existing is not None:
            subscription = await self._repo.update_subscription(existing.id, data)
        else:
            subscription = await self._repo.create_subscription(data)

        await self._set_role(user_id, Role.SUBSCRIBER)
        logger.info(f"User {user_id} subscribed to {plan.name}")
        return subscription

    async def cancel(self, user_id: str) -> Subscription:
        """
        Cancel the user's subscription.

        The end date is set to now, so access stops immediately.
        """
        existing = await self._repo.fetch_current_subscription(user_id)
        if existing is None or existing.status == SubscriptionStatus.CANCELED:
            raise SubscriptionNotFoundError(user_id)

        subscription = await self._repo.update_subscription(
            existing.id,
            {
                "user_id": user_id,
                "status": SubscriptionStatus.CANCELED,
                "end_date": utcnow(),
            },
        )

        await self._set_role(user_id, Role.GUEST)
        logger.info(f"User {user_id} canceled subscription {existing.id}")
        return subscription

    async def get_status(self, user_id: str) -> SubscriptionStatusResponse:
        """Get the user's entitlement status."""
        subscription = await self._repo.fetch_current_subscription(user_id)
        return SubscriptionStatusResponse(
            is_active=is_entitled(subscription),
            state=entitlement_state(subscription),
            plan_name=subscription.plan.name if subscription and subscription.plan else None,
            end_date=subscription.end_date if subscription else None,
        )

    async def list_subscriptions(self) -> list[Subscription]:
        return await self._repo.list_subscriptions()

    async def _set_role(self, user_id: str, role: Role) -> None:
        # Admins keep their role whatever happens to their subscription
        profile = await self._profiles.fetch_profile(user_id)
        if profile is not None and profile.role == Role.ADMIN:
            return
        if profile is not None and profile.role == role:
            return
        await self._profiles.upsert_profile(user_id, {"role": role})
