"""
Billing repository for database access.

Encapsulates all Supabase queries and data mapping for billing tables:
- plans
- subscriptions (joined with their plan)
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from shared.repository import BaseRepository
from .interfaces import ISubscriptionStore
from .models import Plan, Subscription
from .exceptions import PlanNotFoundError, SubscriptionNotFoundError

# PostgREST embed of the subscribed plan
SUBSCRIPTION_SELECT = "*, plan:plans(*)"


class SubscriptionRepository(BaseRepository[Subscription], ISubscriptionStore):
    """
    Repository for plan and subscription data access.

    Note: This repository does NOT perform authorization checks.
    """

    # -------------------------------------------------------------------------
    # Plans
    # -------------------------------------------------------------------------

    async def fetch_plans(self) -> list[Plan]:
        """Active plans, cheapest first."""
        result = (
            self._db.table("plans")
            .select("*")
            .eq("is_active", True)
            .order("price")
            .execute()
        )
        return [Plan.model_validate(row) for row in result.data or []]

    async def fetch_plan(self, plan_id: str) -> Optional[Plan]:
        """Get a plan by ID (active or not), or None."""
        result = self._db.table("plans").select("*").eq("id", plan_id).limit(1).execute()
        row = self._first(result)
        return Plan.model_validate(row) if row else None

    async def create_plan(self, data: dict[str, Any]) -> Plan:
        result = self._db.table("plans").insert(_serialize(data)).execute()
        return Plan.model_validate(result.data[0])

    async def update_plan(self, plan_id: str, data: dict[str, Any]) -> Plan:
        """
        Update a plan.

        Raises:
            PlanNotFoundError: If no plan matched
        """
        payload = _serialize(data)
        payload["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = self._db.table("plans").update(payload).eq("id", plan_id).execute()
        row = self._first(result)
        if row is None:
            raise PlanNotFoundError(plan_id)
        return Plan.model_validate(row)

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    async def fetch_current_subscription(self, user_id: str) -> Optional[Subscription]:
        """The user's most recently created subscription, with its plan."""
        result = (
            self._db.table("subscriptions")
            .select(SUBSCRIPTION_SELECT)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        row = self._first(result)
        return Subscription.model_validate(row) if row else None

    async def create_subscription(self, data: dict[str, Any]) -> Subscription:
        result = self._db.table("subscriptions").insert(_serialize(data)).execute()
        created = Subscription.model_validate(result.data[0])
        return await self._with_plan(created)

    async def update_subscription(
        self,
        subscription_id: str,
        data: dict[str, Any],
    ) -> Subscription:
        """
        Update a subscription.

        Raises:
            SubscriptionNotFoundError: If no subscription matched
        """
        payload = _serialize(data)
        payload["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = (
            self._db.table("subscriptions")
            .update(payload)
            .eq("id", subscription_id)
            .execute()
        )
        row = self._first(result)
        if row is None:
            raise SubscriptionNotFoundError(str(data.get("user_id", "")))
        return await self._with_plan(Subscription.model_validate(row))

    async def list_subscriptions(self) -> list[Subscription]:
        """All subscriptions with their plans, newest first."""
        result = (
            self._db.table("subscriptions")
            .select(SUBSCRIPTION_SELECT)
            .order("created_at", desc=True)
            .execute()
        )
        return [Subscription.model_validate(row) for row in result.data or []]

    async def _with_plan(self, subscription: Subscription) -> Subscription:
        # insert/update responses don't carry the embedded plan
        if subscription.plan is not None:
            return subscription
        plan = await self.fetch_plan(subscription.plan_id)
        return subscription.model_copy(update={"plan": plan})


def _serialize(data: dict[str, Any]) -> dict[str, Any]:
    """Convert values PostgREST can't encode (Decimal, datetime, Enum)."""
    out: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, datetime):
            out[key] = value.isoformat()
        elif isinstance(value, Enum):
            out[key] = value.value
        elif isinstance(value, Decimal):
            out[key] = float(value)
        else:
            out[key] = value
    return out
