"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Routes and guards only ever see interfaces; tests override the
dependency functions below with in-memory fakes.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import ISessionProvider
    from modules.billing.interfaces import IBillingService
    from modules.billing.repository import SubscriptionRepository
    from modules.identity.service import IdentityService
    from modules.profiles.repository import ProfileRepository
    from modules.profiles.service import ProfileService


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._session_provider: "ISessionProvider | None" = None
        self._profile_repository: "ProfileRepository | None" = None
        self._subscription_repository: "SubscriptionRepository | None" = None
        self._profile_service: "ProfileService | None" = None
        self._billing_service: "IBillingService | None" = None
        self._identity_service: "IdentityService | None" = None

    @property
    def session_provider(self) -> "ISessionProvider":
        """Get the session provider instance."""
        if self._session_provider is None:
            from modules.auth.service import get_session_provider
            self._session_provider = get_session_provider()
        return self._session_provider

    @property
    def profile_repository(self) -> "ProfileRepository":
        """Get the profile repository instance."""
        if self._profile_repository is None:
            from modules.profiles.repository import ProfileRepository
            from shared.database import get_supabase_client
            self._profile_repository = ProfileRepository(get_supabase_client())
        return self._profile_repository

    @property
    def subscription_repository(self) -> "SubscriptionRepository":
        """Get the subscription repository instance."""
        if self._subscription_repository is None:
            from modules.billing.repository import SubscriptionRepository
            from shared.database import get_supabase_client
            self._subscription_repository = SubscriptionRepository(get_supabase_client())
        return self._subscription_repository

    @property
    def profiles(self) -> "ProfileService":
        """Get the profile service instance."""
        if self._profile_service is None:
            from modules.profiles.service import ProfileService
            from shared.database import get_supabase_client
            self._profile_service = ProfileService(
                repository=self.profile_repository,
                db=get_supabase_client(),
            )
        return self._profile_service

    @property
    def billing(self) -> "IBillingService":
        """Get the billing service instance."""
        if self._billing_service is None:
            from modules.billing.service import BillingService
            self._billing_service = BillingService(
                repository=self.subscription_repository,
                profiles=self.profile_repository,
            )
        return self._billing_service

    @property
    def identity(self) -> "IdentityService":
        """Get the identity service instance."""
        if self._identity_service is None:
            from modules.identity.service import IdentityService
            self._identity_service = IdentityService(
                profile_store=self.profile_repository,
                subscription_store=self.subscription_repository,
            )
        return self._identity_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._session_provider = None
        self._profile_repository = None
        self._subscription_repository = None
        self._profile_service = None
        self._billing_service = None
        self._identity_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_session_provider() -> "ISessionProvider":
    """FastAPI dependency for the session provider."""
    return get_container().session_provider


def get_profile_service() -> "ProfileService":
    """FastAPI dependency for profile service."""
    return get_container().profiles


def get_billing_service() -> "IBillingService":
    """FastAPI dependency for billing service."""
    return get_container().billing


def get_identity_service() -> "IdentityService":
    """FastAPI dependency for identity service."""
    return get_container().identity
