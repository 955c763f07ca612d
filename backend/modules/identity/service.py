"""
One-shot identity resolution.

Used by the API to build a CurrentUser for each request. Long-lived
consumers use IdentityAggregate instead, which keeps the result current.
"""

import asyncio
from datetime import datetime
from typing import Optional

from modules.auth.models import Session
from modules.billing.interfaces import ISubscriptionStore
from modules.billing.models import Subscription
from modules.billing.resolver import SubscriptionResolver
from modules.profiles.interfaces import IProfileStore
from modules.profiles.models import Profile
from modules.profiles.resolver import ProfileResolver

from .derive import derive_current_user
from .models import CurrentUser


class IdentityService:
    """Resolves a session's profile and subscription and derives a CurrentUser."""

    def __init__(
        self,
        profile_store: IProfileStore,
        subscription_store: ISubscriptionStore,
    ):
        self.profile_store = profile_store
        self.subscription_store = subscription_store
        self.profiles = ProfileResolver(profile_store)
        self.subscriptions = SubscriptionResolver(subscription_store)

    async def fetch(self, session: Session) -> tuple[Profile, Optional[Subscription]]:
        """
        Resolve profile and subscription concurrently.

        Neither resolver raises, so this always returns a usable pair.
        """
        profile, subscription = await asyncio.gather(
            self.profiles.resolve_profile(session.user_id, session.display_name),
            self.subscriptions.resolve_subscription(session.user_id),
        )
        return profile, subscription

    async def resolve(
        self,
        session: Session,
        now: Optional[datetime] = None,
    ) -> CurrentUser:
        """Resolve and derive the CurrentUser for a session."""
        profile, subscription = await self.fetch(session)
        return derive_current_user(session, profile, subscription, now)
