"""
Subscription resolver.

Fetches a user's current subscription for entitlement checks. A failed
fetch means "no subscription": entitlement is never assumed on error.
"""

import logging
from typing import Optional

from .interfaces import ISubscriptionStore
from .models import Subscription

logger = logging.getLogger(__name__)


class SubscriptionResolver:
    """Resolves the current subscription with a no-entitlement fallback."""

    def __init__(self, store: ISubscriptionStore):
        self._store = store

    async def resolve_subscription(self, user_id: str) -> Optional[Subscription]:
        """
        Get the user's most recent subscription.

        Returns:
            The subscription, or None if the user has none or the store
            could not be reached
        """
        try:
            return await self._store.fetch_current_subscription(user_id)
        except Exception as e:
            logger.warning(
                f"Subscription lookup failed for {user_id}, assuming none: {e}"
            )
            return None
