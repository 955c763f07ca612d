"""
Route and component guards.

A Guard maps the gate's Decision to what should be shown: a loading
placeholder, a redirect to sign-in, a denial, or the guarded content.
Rendering is pure. GuardController owns the side effect of navigating,
and only navigates when the state moves into UNAUTHENTICATED.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from urllib.parse import urlencode

from modules.identity.interfaces import IIdentitySource
from modules.identity.models import CurrentUserState
from shared.config import get_settings

from .gate import evaluate
from .interfaces import INavigator
from .models import Decision, DecisionOutcome, Requirement
from .views import DenialView

logger = logging.getLogger(__name__)


class GuardState(str, Enum):
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    DENIED = "denied"
    ALLOWED = "allowed"


_STATE_FOR_OUTCOME = {
    DecisionOutcome.PENDING: GuardState.LOADING,
    DecisionOutcome.UNAUTHENTICATED: GuardState.UNAUTHENTICATED,
    DecisionOutcome.DENY: GuardState.DENIED,
    DecisionOutcome.ALLOW: GuardState.ALLOWED,
}


def guard_state_for(decision: Decision) -> GuardState:
    return _STATE_FOR_OUTCOME[decision.outcome]


def sign_in_url(destination: Optional[str] = None) -> str:
    """Sign-in path carrying the page to return to as ``next``."""
    path = get_settings().sign_in_path
    if not destination:
        return path
    return f"{path}?{urlencode({'next': destination})}"


@dataclass(frozen=True)
class LoadingPlaceholder:
    """Shown while identity is still resolving."""
    message: str = "Checking authentication..."


@dataclass(frozen=True)
class Redirect:
    """Instruction to send the user elsewhere."""
    path: str


class Guard:
    """
    Guards a route or region behind a Requirement.

    Args:
        requirement: What the content needs (empty means signed-in only)
        children: The guarded content, returned as-is when allowed
        fallback: Shown instead of the default DenialView when denied
        destination: Where the content lives, for the sign-in ``next``
    """

    def __init__(
        self,
        requirement: Optional[Requirement] = None,
        children: Any = None,
        fallback: Any = None,
        destination: Optional[str] = None,
    ):
        self.requirement = requirement or Requirement()
        self.children = children
        self.fallback = fallback
        self.destination = destination

    def decide(self, state: CurrentUserState, now: Optional[datetime] = None) -> Decision:
        return evaluate(state, self.requirement, now)

    def state(self, state: CurrentUserState, now: Optional[datetime] = None) -> GuardState:
        return guard_state_for(self.decide(state, now))

    def render(
        self,
        state: CurrentUserState,
        destination: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Any:
        """Return what to show for ``state``. Has no side effects."""
        decision = self.decide(state, now)
        guard_state = guard_state_for(decision)

        if guard_state == GuardState.LOADING:
            return LoadingPlaceholder()
        if guard_state == GuardState.UNAUTHENTICATED:
            return Redirect(sign_in_url(destination or self.destination))
        if guard_state == GuardState.DENIED:
            if self.fallback is not None:
                return self.fallback
            return DenialView.from_decision(decision, get_settings().pricing_path)
        return self.children


class GuardController:
    """
    Keeps a Guard's state in step with an identity source.

    Navigates to sign-in once per transition into UNAUTHENTICATED,
    including when that is the state the controller starts in.
    """

    def __init__(
        self,
        source: IIdentitySource,
        guard: Guard,
        navigator: INavigator,
        destination: Optional[str] = None,
    ):
        self._source = source
        self._guard = guard
        self._navigator = navigator
        self._destination = destination or guard.destination
        self._state: Optional[GuardState] = None
        self._closed = False

        self._update(source.snapshot)
        self._unsubscribe = source.subscribe(self._update)

    @property
    def state(self) -> Optional[GuardState]:
        return self._state

    def render(self) -> Any:
        return self._guard.render(self._source.snapshot, self._destination)

    def close(self) -> None:
        """Stop following the identity source."""
        if self._closed:
            return
        self._closed = True
        self._unsubscribe()

    def _update(self, snapshot: CurrentUserState) -> None:
        if self._closed:
            return
        previous = self._state
        self._state = self._guard.state(snapshot)
        if self._state == GuardState.UNAUTHENTICATED and previous != GuardState.UNAUTHENTICATED:
            path = sign_in_url(self._destination)
            logger.debug(f"Redirecting to {path}")
            self._navigator.redirect(path)
