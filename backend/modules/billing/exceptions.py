"""
Billing module exceptions.

These exceptions are raised by the billing module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import ConflictError, NotFoundError, ProspectError, ValidationError


class BillingError(ProspectError):
    """Base exception for billing-related errors."""

    pass


class PlanNotFoundError(NotFoundError):
    """Raised when a plan doesn't exist."""

    def __init__(self, plan_id: str):
        super().__init__(
            f"Plan not found: {plan_id}",
            code="PLAN_NOT_FOUND",
            details={"plan_id": plan_id},
        )


class InactivePlanError(ValidationError):
    """Raised when subscribing to a plan that is no longer offered."""

    def __init__(self, plan_id: str):
        super().__init__(
            f"Plan is not available for purchase: {plan_id}",
            code="PLAN_INACTIVE",
            details={"plan_id": plan_id},
        )


class AlreadySubscribedError(BillingError, ConflictError):
    """
    Raised when a user with a live subscription tries to subscribe again.

    The UI should send the user to plan management instead.
    """

    def __init__(self, user_id: str):
        super().__init__(
            "User already has an active subscription",
            code="ALREADY_SUBSCRIBED",
            details={"user_id": user_id},
        )


class SubscriptionNotFoundError(NotFoundError):
    """Raised when a user has no subscription to act on."""

    def __init__(self, user_id: str):
        super().__init__(
            "No subscription found",
            code="SUBSCRIPTION_NOT_FOUND",
            details={"user_id": user_id},
        )
