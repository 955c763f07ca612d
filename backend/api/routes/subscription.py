"""
Subscription endpoints.

Subscribe, cancel and inspect the caller's subscription.
"""

from fastapi import APIRouter, Depends, HTTPException

from modules.billing.interfaces import IBillingService
from modules.billing.models import (
    SubscribeRequest,
    Subscription,
    SubscriptionResponse,
    SubscriptionStatusResponse,
)
from modules.billing.exceptions import (
    AlreadySubscribedError,
    InactivePlanError,
    PlanNotFoundError,
    SubscriptionNotFoundError,
)
from modules.identity.models import CurrentUser

from ..dependencies import get_billing_service
from ..middleware.auth import get_current_user
from ..middleware.guards import require_admin

router = APIRouter()


@router.get("", response_model=Subscription)
async def get_subscription(
    user: CurrentUser = Depends(get_current_user),
    service: IBillingService = Depends(get_billing_service),
) -> Subscription:
    """Get the caller's current subscription with its plan."""
    subscription = await service.get_current_subscription(user.user_id)
    if subscription is None:
        raise HTTPException(status_code=404, detail="No subscription found")
    return subscription


@router.post("/subscribe", response_model=SubscriptionResponse, status_code=201)
async def subscribe(
    request: SubscribeRequest,
    user: CurrentUser = Depends(get_current_user),
    service: IBillingService = Depends(get_billing_service),
) -> SubscriptionResponse:
    """Subscribe the caller to a plan."""
    try:
        subscription = await service.subscribe(user.user_id, request.plan_id)
    except PlanNotFoundError:
        raise HTTPException(status_code=404, detail="Plan not found")
    except InactivePlanError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except AlreadySubscribedError as e:
        raise HTTPException(status_code=409, detail=e.message)
    return SubscriptionResponse(
        subscription=subscription,
        message="Subscription created successfully",
    )


@router.post("/cancel", response_model=SubscriptionResponse)
async def cancel(
    user: CurrentUser = Depends(get_current_user),
    service: IBillingService = Depends(get_billing_service),
) -> SubscriptionResponse:
    """Cancel the caller's subscription. Access ends immediately."""
    try:
        subscription = await service.cancel(user.user_id)
    except SubscriptionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return SubscriptionResponse(
        subscription=subscription,
        message="Subscription canceled successfully",
    )


@router.get("/status", response_model=SubscriptionStatusResponse)
async def get_status(
    user: CurrentUser = Depends(get_current_user),
    service: IBillingService = Depends(get_billing_service),
) -> SubscriptionStatusResponse:
    """Whether the caller is entitled right now."""
    return await service.get_status(user.user_id)


@router.get("/all", response_model=list[Subscription])
async def list_subscriptions(
    admin: CurrentUser = Depends(require_admin),
    service: IBillingService = Depends(get_billing_service),
) -> list[Subscription]:
    """All subscriptions, newest first. Admin only."""
    return await service.list_subscriptions()
