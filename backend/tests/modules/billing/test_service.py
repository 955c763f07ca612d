"""
Tests for BillingService.

Subscribing and canceling keep the profile role in step, except for
admins whose role billing never touches.
"""

from datetime import timedelta

import pytest
from unittest.mock import AsyncMock

from modules.billing.exceptions import (
    AlreadySubscribedError,
    InactivePlanError,
    PlanNotFoundError,
    SubscriptionNotFoundError,
)
from modules.billing.models import (
    EntitlementState,
    PlanCreate,
    PlanUpdate,
    SubscriptionStatus,
)
from modules.billing.service import BillingService
from modules.profiles.models import Role

from tests.conftest import NOW, make_plan, make_profile, make_subscription


@pytest.fixture
def repo():
    return AsyncMock()


@pytest.fixture
def profiles():
    return AsyncMock()


@pytest.fixture
def service(repo, profiles):
    return BillingService(repo, profiles)


class TestPlans:
    @pytest.mark.asyncio
    async def test_get_plan_missing(self, service, repo):
        repo.fetch_plan.return_value = None
        with pytest.raises(PlanNotFoundError):
            await service.get_plan("nope")

    @pytest.mark.asyncio
    async def test_create_plan(self, service, repo):
        repo.create_plan.return_value = make_plan("Pro")
        await service.create_plan(PlanCreate(name="Pro", price="49"))
        data = repo.create_plan.call_args[0][0]
        assert data["name"] == "Pro"

    @pytest.mark.asyncio
    async def test_update_plan_writes_only_set_fields(self, service, repo):
        repo.update_plan.return_value = make_plan("Pro", is_active=False)
        await service.update_plan("plan-pro", PlanUpdate(is_active=False))
        repo.update_plan.assert_awaited_once_with("plan-pro", {"is_active": False})

    @pytest.mark.asyncio
    async def test_empty_update_returns_plan(self, service, repo):
        repo.fetch_plan.return_value = make_plan("Pro")
        plan = await service.update_plan("plan-pro", PlanUpdate())
        repo.update_plan.assert_not_awaited()
        assert plan.name == "Pro"


class TestSubscribe:
    @pytest.mark.asyncio
    async def test_new_subscription_promotes_guest(self, service, repo, profiles):
        repo.fetch_plan.return_value = make_plan("Pro")
        repo.fetch_current_subscription.return_value = None
        repo.create_subscription.return_value = make_subscription("user-1")
        profiles.fetch_profile.return_value = make_profile("user-1", Role.GUEST)

        await service.subscribe("user-1", "plan-pro")

        data = repo.create_subscription.call_args[0][0]
        assert data["status"] == SubscriptionStatus.ACTIVE
        assert data["end_date"] is None
        profiles.upsert_profile.assert_awaited_once_with("user-1", {"role": Role.SUBSCRIBER})

    @pytest.mark.asyncio
    async def test_reactivates_existing_row(self, service, repo, profiles):
        repo.fetch_plan.return_value = make_plan("Pro")
        repo.fetch_current_subscription.return_value = make_subscription(
            "user-1", status="canceled", end_date=NOW
        )
        repo.update_subscription.return_value = make_subscription("user-1")
        profiles.fetch_profile.return_value = make_profile("user-1", Role.GUEST)

        await service.subscribe("user-1", "plan-pro")

        repo.create_subscription.assert_not_awaited()
        assert repo.update_subscription.call_args[0][0] == "sub-1"
        data = repo.update_subscription.call_args[0][1]
        assert data["status"] == SubscriptionStatus.ACTIVE
        assert data["end_date"] is None
        assert data["external_subscription_id"] is None

    @pytest.mark.asyncio
    async def test_admin_role_untouched(self, service, repo, profiles):
        repo.fetch_plan.return_value = make_plan("Pro")
        repo.fetch_current_subscription.return_value = None
        repo.create_subscription.return_value = make_subscription("admin-1")
        profiles.fetch_profile.return_value = make_profile("admin-1", Role.ADMIN)

        await service.subscribe("admin-1", "plan-pro")

        profiles.upsert_profile.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_already_subscribed(self, service, repo):
        repo.fetch_plan.return_value = make_plan("Pro")
        repo.fetch_current_subscription.return_value = make_subscription("user-1")
        with pytest.raises(AlreadySubscribedError):
            await service.subscribe("user-1", "plan-pro")

    @pytest.mark.asyncio
    async def test_expired_active_row_can_resubscribe(self, service, repo, profiles):
        repo.fetch_plan.return_value = make_plan("Pro")
        repo.fetch_current_subscription.return_value = make_subscription(
            "user-1", end_date=NOW - timedelta(days=365)
        )
        repo.update_subscription.return_value = make_subscription("user-1")
        profiles.fetch_profile.return_value = make_profile("user-1", Role.SUBSCRIBER)

        await service.subscribe("user-1", "plan-pro")

        repo.update_subscription.assert_awaited_once()
        profiles.upsert_profile.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_inactive_plan(self, service, repo):
        repo.fetch_plan.return_value = make_plan("Legacy", is_active=False)
        with pytest.raises(InactivePlanError):
            await service.subscribe("user-1", "plan-legacy")


class TestCancel:
    @pytest.mark.asyncio
    async def test_cancel_demotes_subscriber(self, service, repo, profiles):
        repo.fetch_current_subscription.return_value = make_subscription("user-1")
        repo.update_subscription.return_value = make_subscription(
            "user-1", status="canceled", end_date=NOW
        )
        profiles.fetch_profile.return_value = make_profile("user-1", Role.SUBSCRIBER)

        await service.cancel("user-1")

        data = repo.update_subscription.call_args[0][1]
        assert data["status"] == SubscriptionStatus.CANCELED
        assert data["end_date"] is not None
        profiles.upsert_profile.assert_awaited_once_with("user-1", {"role": Role.GUEST})

    @pytest.mark.asyncio
    async def test_cancel_keeps_admin(self, service, repo, profiles):
        repo.fetch_current_subscription.return_value = make_subscription("admin-1")
        repo.update_subscription.return_value = make_subscription(
            "admin-1", status="canceled", end_date=NOW
        )
        profiles.fetch_profile.return_value = make_profile("admin-1", Role.ADMIN)

        await service.cancel("admin-1")

        profiles.upsert_profile.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cancel_without_subscription(self, service, repo):
        repo.fetch_current_subscription.return_value = None
        with pytest.raises(SubscriptionNotFoundError):
            await service.cancel("user-1")

    @pytest.mark.asyncio
    async def test_cancel_twice(self, service, repo):
        repo.fetch_current_subscription.return_value = make_subscription(
            "user-1", status="canceled"
        )
        with pytest.raises(SubscriptionNotFoundError):
            await service.cancel("user-1")


class TestStatus:
    @pytest.mark.asyncio
    async def test_active_status(self, service, repo):
        repo.fetch_current_subscription.return_value = make_subscription(
            plan=make_plan("Pro")
        )
        status = await service.get_status("user-1")
        assert status.is_active is True
        assert status.state == EntitlementState.ACTIVE
        assert status.plan_name == "Pro"

    @pytest.mark.asyncio
    async def test_no_subscription_status(self, service, repo):
        repo.fetch_current_subscription.return_value = None
        status = await service.get_status("user-1")
        assert status.is_active is False
        assert status.state == EntitlementState.NONE
        assert status.plan_name is None
