"""
Fixtures for API tests.

Requests carry real JWTs signed with the test secret. Profiles and
subscriptions come from in-memory stores wired in through
``app.dependency_overrides``.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import (
    get_billing_service,
    get_identity_service,
    get_profile_service,
    get_session_provider,
)
from modules.auth.service import SupabaseSessionProvider
from modules.identity.service import IdentityService
from modules.profiles.models import Role

from tests.conftest import (
    TEST_JWT_SECRET,
    InMemoryProfileStore,
    InMemorySubscriptionStore,
    make_profile,
)


@pytest.fixture
def session_provider():
    """Session provider validating tokens against the test secret."""
    with patch("modules.auth.service.get_settings") as mock_settings:
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        yield SupabaseSessionProvider(client=MagicMock())


@pytest.fixture
def profile_store():
    return InMemoryProfileStore(
        [
            make_profile("admin-1", Role.ADMIN, "Ada Admin"),
            make_profile("sub-1", Role.SUBSCRIBER),
            make_profile("guest-1", Role.GUEST),
        ]
    )


@pytest.fixture
def subscription_store():
    return InMemorySubscriptionStore()


@pytest.fixture
def profile_service():
    return AsyncMock()


@pytest.fixture
def billing_service():
    return AsyncMock()


@pytest.fixture
def app(session_provider, profile_store, subscription_store, profile_service, billing_service):
    app = create_app()
    identity = IdentityService(profile_store, subscription_store)
    app.dependency_overrides[get_session_provider] = lambda: session_provider
    app.dependency_overrides[get_identity_service] = lambda: identity
    app.dependency_overrides[get_profile_service] = lambda: profile_service
    app.dependency_overrides[get_billing_service] = lambda: billing_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)
