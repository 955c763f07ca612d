"""
Identity module interface.

Guards depend on IIdentitySource, so they can watch any store that
publishes CurrentUserState, not just IdentityAggregate.
"""

from typing import Callable, Protocol, runtime_checkable

from .models import CurrentUserState

StateListener = Callable[[CurrentUserState], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class IIdentitySource(Protocol):
    """A read-only, observable source of CurrentUserState."""

    @property
    def snapshot(self) -> CurrentUserState:
        """The current state."""
        ...

    def subscribe(self, listener: StateListener) -> Unsubscribe:
        """
        Register a listener called with every new state.

        Returns:
            A callable that removes the listener
        """
        ...
