"""
Billing module data models.

Plans are priced product tiers; subscriptions bind a user to a plan over
time. Whether a subscription entitles its user right now is derived, see
``entitlement.py``.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class SubscriptionStatus(str, Enum):
    """Stored subscription status."""

    ACTIVE = "active"
    CANCELED = "canceled"
    PAST_DUE = "past_due"
    INCOMPLETE = "incomplete"  # Checkout started but never completed


class EntitlementState(str, Enum):
    """Normalized, time-aware view of a subscription."""

    ACTIVE = "active"
    EXPIRED = "expired"      # Status says active but end_date has passed
    CANCELED = "canceled"
    PAST_DUE = "past_due"
    NONE = "none"            # No subscription, or checkout never completed


class Plan(BaseModel):
    """A purchasable product tier."""

    id: str = Field(..., description="Plan ID (UUID)")
    name: str = Field(..., description="Plan name, unique in the active catalog")
    price: Decimal = Field(..., description="Price in USD")
    features: list[str] = Field(default_factory=list, description="Capability labels")
    is_active: bool = Field(default=True, description="Offered for purchase")
    created_at: Optional[datetime] = Field(None)
    updated_at: Optional[datetime] = Field(None)

    model_config = {"extra": "ignore"}

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value

    @field_validator("features", mode="before")
    @classmethod
    def _default_features(cls, value: Any) -> Any:
        return value or []


class Subscription(BaseModel):
    """A user's subscription to a plan."""

    id: str = Field(..., description="Subscription ID (UUID)")
    user_id: str = Field(..., description="Subscriber's user ID")
    plan_id: str = Field(..., description="Subscribed plan ID")
    status: SubscriptionStatus = Field(..., description="Stored status")
    start_date: datetime = Field(..., description="When the subscription started")
    end_date: Optional[datetime] = Field(None, description="When access ends, if set")
    external_subscription_id: Optional[str] = Field(
        None, description="Payment provider subscription ID"
    )
    created_at: Optional[datetime] = Field(None)
    updated_at: Optional[datetime] = Field(None)
    plan: Optional[Plan] = Field(None, description="Embedded plan, when joined")

    model_config = {"extra": "ignore"}

    @field_validator("id", "user_id", "plan_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        return str(value) if value is not None else value

    @field_validator("status", mode="before")
    @classmethod
    def _lowercase_status(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class PlanCreate(BaseModel):
    """Admin request to add a plan to the catalog."""

    name: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., ge=0)
    features: list[str] = Field(default_factory=list)
    is_active: bool = True


class PlanUpdate(BaseModel):
    """Admin request to change a plan. Only set fields are written."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[Decimal] = Field(None, ge=0)
    features: Optional[list[str]] = None
    is_active: Optional[bool] = None


class SubscribeRequest(BaseModel):
    """Request to subscribe to a plan."""

    plan_id: str = Field(..., description="Plan to subscribe to")
    payment_method: Optional[str] = Field(None, description="Payment method hint")


class SubscriptionResponse(BaseModel):
    """Result of a subscribe or cancel call."""

    subscription: Subscription
    message: str


class SubscriptionStatusResponse(BaseModel):
    """API response for subscription status checks."""

    is_active: bool = Field(..., description="Whether the user is entitled now")
    state: EntitlementState = Field(..., description="Normalized state")
    plan_name: Optional[str] = Field(None, description="Current plan name")
    end_date: Optional[datetime] = Field(None, description="Access end, if set")
