"""
Identity aggregate.

The single writer of CurrentUserState. It listens to the session
provider, resolves profile and subscription for each new user, keeps the
subscription fresh with a poll task, and publishes every change to its
listeners.

Every resolution is tagged with the user id and a generation number at
the time it started. A result is applied only if both still match when
it arrives, so a slow lookup for a previous user can never overwrite the
state of the current one.
"""

import asyncio
import logging
import time
from typing import Any, Callable, Optional

from modules.auth.interfaces import ISessionProvider
from modules.auth.models import Session
from modules.profiles.models import Profile, ProfileUpdate
from shared.config import get_settings
from shared.exceptions import AuthenticationError, ValidationError

from .derive import derive_current_user
from .interfaces import IIdentitySource, StateListener, Unsubscribe
from .models import CurrentUserState
from .service import IdentityService

logger = logging.getLogger(__name__)


class IdentityAggregate(IIdentitySource):
    """
    Push-based store of the signed-in user's identity.

    Usage:
        aggregate = IdentityAggregate(provider, identity_service)
        await aggregate.start()
        unsubscribe = aggregate.subscribe(on_change)
        ...
        await aggregate.stop()
    """

    def __init__(
        self,
        provider: ISessionProvider,
        service: IdentityService,
        poll_interval: Optional[float] = None,
        refresh_min_interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        settings = get_settings()
        self._provider = provider
        self._service = service
        self._poll_interval = (
            settings.subscription_poll_interval if poll_interval is None else poll_interval
        )
        self._refresh_min_interval = (
            settings.subscription_refresh_min_interval
            if refresh_min_interval is None
            else refresh_min_interval
        )
        self._clock = clock

        self._state = CurrentUserState.loading()
        self._generation = 0
        self._listeners: list[StateListener] = []

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._unsubscribe_session: Optional[Unsubscribe] = None
        self._poll_task: Optional[asyncio.Task] = None
        self._event_tasks: set[asyncio.Task] = set()

        self._refreshing = False
        self._last_refresh: Optional[float] = None

    @property
    def snapshot(self) -> CurrentUserState:
        """The current state. Read-only: only this aggregate replaces it."""
        return self._state

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Load the current session and start listening for changes."""
        self._loop = asyncio.get_running_loop()
        self._unsubscribe_session = self._provider.on_session_change(
            self._on_provider_event
        )
        if self._poll_interval > 0:
            self._poll_task = asyncio.create_task(self._poll())
        await self.handle_session_change(self._provider.get_session())

    async def stop(self) -> None:
        """Stop listening, cancel background work and drop all listeners."""
        if self._unsubscribe_session is not None:
            self._unsubscribe_session()
            self._unsubscribe_session = None

        # Anything still in flight is now stale
        self._generation += 1

        tasks = list(self._event_tasks)
        if self._poll_task is not None:
            tasks.append(self._poll_task)
            self._poll_task = None
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        self._event_tasks.clear()
        self._listeners.clear()
        self._loop = None

    def _on_provider_event(self, session: Optional[Session]) -> None:
        # Supabase calls listeners synchronously, possibly off the loop.
        # call_soon_threadsafe keeps delivery order.
        if self._loop is None:
            return
        self._loop.call_soon_threadsafe(self._dispatch, session)

    def _dispatch(self, session: Optional[Session]) -> None:
        task = asyncio.create_task(self.handle_session_change(session))
        self._event_tasks.add(task)
        task.add_done_callback(self._event_tasks.discard)

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            await self.refresh_subscription()

    # -------------------------------------------------------------------------
    # Session changes
    # -------------------------------------------------------------------------

    async def handle_session_change(self, session: Optional[Session]) -> None:
        """
        Process a session change.

        Everything before the first await runs synchronously, so events
        take effect in the order they are delivered.
        """
        if session is None:
            self._generation += 1
            self._apply(CurrentUserState.signed_out())
            return

        current = self._state
        if current.session is not None and current.session.user_id == session.user_id:
            if current.current_user is not None:
                # Token refresh for the same user: keep cached data
                user = current.current_user.model_copy(update={"session": session})
                self._apply(CurrentUserState.ready(user))
                return
            if current.is_loading:
                # Already resolving this user, just swap the session
                self._apply(CurrentUserState.loading(session))
                return

        self._generation += 1
        generation = self._generation
        self._apply(CurrentUserState.loading(session))
        await self._load(session, generation)

    async def invalidate(self, user_id: str) -> None:
        """Discard cached state for ``user_id`` if current, and re-resolve."""
        session = self._state.session
        if session is None or session.user_id != user_id:
            return
        logger.info(f"Identity invalidated for {user_id}")
        self._generation += 1
        generation = self._generation
        self._apply(CurrentUserState.loading(session))
        await self._load(session, generation)

    async def _load(self, session: Session, generation: int) -> None:
        profile, subscription = await self._service.fetch(session)
        if not self._is_current(session.user_id, generation):
            logger.debug(f"Discarding stale identity resolution for {session.user_id}")
            return
        latest = self._state.session or session
        self._apply(
            CurrentUserState.ready(derive_current_user(latest, profile, subscription))
        )

    # -------------------------------------------------------------------------
    # Partial refreshes
    # -------------------------------------------------------------------------

    async def refresh_subscription(self, force: bool = False) -> bool:
        """
        Re-fetch the subscription and re-derive.

        Skipped while another refresh is in flight, and when the previous
        one started less than the minimum interval ago unless ``force``.

        Returns:
            True if a refresh ran
        """
        user = self._state.current_user
        if user is None:
            return False
        if self._refreshing:
            logger.debug("Subscription refresh already in flight, skipping")
            return False

        now = self._clock()
        if (
            not force
            and self._last_refresh is not None
            and now - self._last_refresh < self._refresh_min_interval
        ):
            logger.debug("Subscription refreshed recently, skipping")
            return False

        self._refreshing = True
        self._last_refresh = now
        generation = self._generation
        try:
            subscription = await self._service.subscriptions.resolve_subscription(
                user.user_id
            )
        finally:
            self._refreshing = False

        current = self._state.current_user
        if not self._is_current(user.user_id, generation) or current is None:
            logger.debug(f"Discarding stale subscription refresh for {user.user_id}")
            return True

        self._apply(
            CurrentUserState.ready(
                derive_current_user(current.session, current.profile, subscription)
            )
        )
        return True

    async def update_profile(self, patch: dict[str, Any]) -> Profile:
        """
        Write the signed-in user's own profile change and re-derive.

        Only the display name can be changed here; role changes go through
        the admin profile service.

        Raises:
            AuthenticationError: If nobody is signed in
            ValidationError: If the patch touches any other field
        """
        user = self._state.current_user
        if user is None:
            raise AuthenticationError("Not signed in")

        forbidden = sorted(set(patch) - set(ProfileUpdate.model_fields))
        if forbidden:
            raise ValidationError(
                f"Cannot change {', '.join(forbidden)} on your own profile",
                code="PROFILE_FIELD_READ_ONLY",
                details={"fields": forbidden},
            )
        changes = ProfileUpdate.model_validate(patch).model_dump(exclude_unset=True)

        generation = self._generation
        profile = await self._service.profile_store.upsert_profile(user.user_id, changes)

        current = self._state.current_user
        if self._is_current(user.user_id, generation) and current is not None:
            self._apply(
                CurrentUserState.ready(
                    derive_current_user(current.session, profile, current.subscription)
                )
            )
        return profile

    # -------------------------------------------------------------------------
    # Publication
    # -------------------------------------------------------------------------

    def subscribe(self, listener: StateListener) -> Unsubscribe:
        """Register a listener for state changes."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _is_current(self, user_id: str, generation: int) -> bool:
        session = self._state.session
        return (
            generation == self._generation
            and session is not None
            and session.user_id == user_id
        )

    def _apply(self, state: CurrentUserState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Identity listener failed")
