"""Tests for subscription endpoints."""

from modules.billing.exceptions import (
    AlreadySubscribedError,
    InactivePlanError,
    PlanNotFoundError,
    SubscriptionNotFoundError,
)
from modules.billing.models import EntitlementState, SubscriptionStatusResponse

from tests.conftest import NOW, bearer, make_subscription


class TestCurrentSubscription:
    def test_get_subscription(self, client, billing_service):
        billing_service.get_current_subscription.return_value = make_subscription("sub-1")

        response = client.get("/api/subscription", headers=bearer("sub-1"))

        assert response.status_code == 200
        assert response.json()["plan"]["name"] == "Pro"
        billing_service.get_current_subscription.assert_awaited_once_with("sub-1")

    def test_no_subscription(self, client, billing_service):
        billing_service.get_current_subscription.return_value = None
        response = client.get("/api/subscription", headers=bearer("guest-1"))
        assert response.status_code == 404
        assert response.json()["detail"] == "No subscription found"

    def test_status(self, client, billing_service):
        billing_service.get_status.return_value = SubscriptionStatusResponse(
            is_active=False, state=EntitlementState.EXPIRED, plan_name="Pro", end_date=NOW
        )
        data = client.get("/api/subscription/status", headers=bearer("sub-1")).json()
        assert data["is_active"] is False
        assert data["state"] == "expired"


class TestSubscribe:
    def test_subscribe(self, client, billing_service):
        billing_service.subscribe.return_value = make_subscription("guest-1")

        response = client.post(
            "/api/subscription/subscribe",
            json={"plan_id": "plan-pro"},
            headers=bearer("guest-1"),
        )

        assert response.status_code == 201
        assert response.json()["message"] == "Subscription created successfully"
        billing_service.subscribe.assert_awaited_once_with("guest-1", "plan-pro")

    def test_unknown_plan(self, client, billing_service):
        billing_service.subscribe.side_effect = PlanNotFoundError("nope")
        response = client.post(
            "/api/subscription/subscribe", json={"plan_id": "nope"}, headers=bearer("guest-1")
        )
        assert response.status_code == 404

    def test_inactive_plan(self, client, billing_service):
        billing_service.subscribe.side_effect = InactivePlanError("plan-legacy")
        response = client.post(
            "/api/subscription/subscribe",
            json={"plan_id": "plan-legacy"},
            headers=bearer("guest-1"),
        )
        assert response.status_code == 400

    def test_already_subscribed(self, client, billing_service):
        billing_service.subscribe.side_effect = AlreadySubscribedError("sub-1")
        response = client.post(
            "/api/subscription/subscribe", json={"plan_id": "plan-pro"}, headers=bearer("sub-1")
        )
        assert response.status_code == 409


class TestCancel:
    def test_cancel(self, client, billing_service):
        billing_service.cancel.return_value = make_subscription(
            "sub-1", status="canceled", end_date=NOW
        )
        response = client.post("/api/subscription/cancel", headers=bearer("sub-1"))
        assert response.status_code == 200
        assert response.json()["subscription"]["status"] == "canceled"

    def test_cancel_without_subscription(self, client, billing_service):
        billing_service.cancel.side_effect = SubscriptionNotFoundError("guest-1")
        response = client.post("/api/subscription/cancel", headers=bearer("guest-1"))
        assert response.status_code == 404


class TestAllSubscriptions:
    def test_admin_lists_all(self, client, billing_service):
        billing_service.list_subscriptions.return_value = [make_subscription("sub-1")]
        response = client.get("/api/subscription/all", headers=bearer("admin-1"))
        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_subscriber_forbidden(self, client):
        response = client.get("/api/subscription/all", headers=bearer("sub-1"))
        assert response.status_code == 403
