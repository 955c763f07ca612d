"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
token helpers, model factories, and in-memory stand-ins for the Supabase
backed stores and session provider.
"""

import asyncio
from datetime import datetime, timezone, timedelta
from decimal import Decimal
from typing import Any, Optional

import jwt  # PyJWT
import pytest

from api.dependencies import reset_container
from modules.auth.models import Session
from modules.auth.service import reset_session_provider
from modules.billing.models import Plan, Subscription
from modules.identity.derive import derive_current_user
from modules.identity.models import CurrentUser
from modules.profiles.exceptions import ProfileConflictError
from modules.profiles.models import Profile, Role


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"

# Fixed evaluation time for entitlement tests
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    full_name: Optional[str] = None,
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        full_name: Display name stored in user_metadata

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
        "user_metadata": {"full_name": full_name} if full_name else {},
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def bearer(user_id: str) -> dict[str, str]:
    """Authorization header for ``user_id`` with a ``<user_id>@example.com`` email."""
    token = create_test_token(user_id=user_id, email=f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


# -----------------------------------------------------------------------------
# Model factories
# -----------------------------------------------------------------------------


def make_session(
    user_id: str = "user-1",
    email: Optional[str] = None,
    full_name: Optional[str] = None,
    token: str = "token",
) -> Session:
    return Session(
        user_id=user_id,
        email=email or f"{user_id}@example.com",
        access_token=token,
        user_metadata={"full_name": full_name} if full_name else {},
    )


def make_profile(
    user_id: str = "user-1",
    role: Role = Role.GUEST,
    full_name: Optional[str] = None,
) -> Profile:
    return Profile(id=user_id, role=role, full_name=full_name)


def make_plan(
    name: str = "Pro",
    plan_id: Optional[str] = None,
    price: str = "49.00",
    is_active: bool = True,
) -> Plan:
    return Plan(
        id=plan_id or f"plan-{name.lower()}",
        name=name,
        price=Decimal(price),
        features=["reports"],
        is_active=is_active,
    )


def make_subscription(
    user_id: str = "user-1",
    status: str = "active",
    end_date: Optional[datetime] = None,
    plan: Optional[Plan] = None,
    subscription_id: str = "sub-1",
) -> Subscription:
    plan = plan or make_plan()
    return Subscription(
        id=subscription_id,
        user_id=user_id,
        plan_id=plan.id,
        status=status,
        start_date=NOW - timedelta(days=30),
        end_date=end_date,
        plan=plan,
    )


def make_user(
    user_id: str = "user-1",
    role: Role = Role.GUEST,
    subscription: Optional[Subscription] = None,
    now: datetime = NOW,
) -> CurrentUser:
    return derive_current_user(
        make_session(user_id),
        make_profile(user_id, role),
        subscription,
        now,
    )


# -----------------------------------------------------------------------------
# In-memory stand-ins
# -----------------------------------------------------------------------------


class InMemoryProfileStore:
    """IProfileStore backed by a dict. Set ``fail`` to simulate an outage."""

    def __init__(self, profiles: Optional[list[Profile]] = None):
        self.profiles = {p.id: p for p in profiles or []}
        self.fail = False
        self.fetch_calls: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}

    async def fetch_profile(self, user_id: str) -> Optional[Profile]:
        self.fetch_calls.append(user_id)
        gate = self.gates.get(user_id)
        if gate is not None:
            await gate.wait()
        if self.fail:
            raise ConnectionError("profile store unavailable")
        return self.profiles.get(user_id)

    async def create_profile(
        self,
        user_id: str,
        full_name: Optional[str] = None,
        role: Role = Role.GUEST,
    ) -> Profile:
        if self.fail:
            raise ConnectionError("profile store unavailable")
        if user_id in self.profiles:
            raise ProfileConflictError(user_id)
        profile = Profile(id=user_id, full_name=full_name, role=role)
        self.profiles[user_id] = profile
        return profile

    async def upsert_profile(self, user_id: str, patch: dict[str, Any]) -> Profile:
        current = self.profiles.get(user_id)
        data = current.model_dump() if current else {"id": user_id}
        data.update(patch)
        profile = Profile.model_validate(data)
        self.profiles[user_id] = profile
        return profile


class InMemorySubscriptionStore:
    """ISubscriptionStore backed by a dict of user id to subscription."""

    def __init__(
        self,
        subscriptions: Optional[dict[str, Subscription]] = None,
        plans: Optional[list[Plan]] = None,
    ):
        self.subscriptions = dict(subscriptions or {})
        self.plans = list(plans or [])
        self.fail = False
        self.fetch_calls: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}

    async def fetch_current_subscription(self, user_id: str) -> Optional[Subscription]:
        self.fetch_calls.append(user_id)
        gate = self.gates.get(user_id)
        if gate is not None:
            await gate.wait()
        if self.fail:
            raise ConnectionError("subscription store unavailable")
        return self.subscriptions.get(user_id)

    async def fetch_plans(self) -> list[Plan]:
        return [p for p in self.plans if p.is_active]


class FakeSessionProvider:
    """ISessionProvider that lets tests emit session changes."""

    def __init__(self, session: Optional[Session] = None):
        self.session = session
        self.callbacks: list = []

    def get_session(self) -> Optional[Session]:
        return self.session

    def on_session_change(self, callback):
        self.callbacks.append(callback)

        def unsubscribe():
            if callback in self.callbacks:
                self.callbacks.remove(callback)

        return unsubscribe

    def emit(self, session: Optional[Session]) -> None:
        self.session = session
        for callback in list(self.callbacks):
            callback(session)

    def sign_in_with_password(self, email: str, password: str) -> Session:
        raise NotImplementedError

    def sign_out(self) -> None:
        self.emit(None)

    def validate_token(self, token: str) -> Session:
        raise NotImplementedError


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the session provider and service container around each test."""
    reset_session_provider()
    reset_container()
    yield
    reset_session_provider()
    reset_container()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}
