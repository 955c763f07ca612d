"""
Entitlement module interface.

Guards never navigate by themselves; they ask an INavigator.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class INavigator(Protocol):
    """Performs navigation on behalf of a guard controller."""

    def redirect(self, path: str) -> None:
        """Navigate to ``path``, replacing the current location."""
        ...
