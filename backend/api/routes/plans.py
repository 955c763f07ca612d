"""
Plan catalog endpoints.

Anyone may browse active plans; only admins change the catalog.
"""

from fastapi import APIRouter, Depends, HTTPException

from modules.billing.interfaces import IBillingService
from modules.billing.models import Plan, PlanCreate, PlanUpdate
from modules.billing.exceptions import PlanNotFoundError
from modules.identity.models import CurrentUser

from ..dependencies import get_billing_service
from ..middleware.guards import require_admin

router = APIRouter()


@router.get("", response_model=list[Plan])
async def list_plans(
    service: IBillingService = Depends(get_billing_service),
) -> list[Plan]:
    """Active plans, cheapest first."""
    return await service.list_plans()


@router.get("/{plan_id}", response_model=Plan)
async def get_plan(
    plan_id: str,
    service: IBillingService = Depends(get_billing_service),
) -> Plan:
    try:
        return await service.get_plan(plan_id)
    except PlanNotFoundError:
        raise HTTPException(status_code=404, detail="Plan not found")


@router.post("", response_model=Plan, status_code=201)
async def create_plan(
    request: PlanCreate,
    admin: CurrentUser = Depends(require_admin),
    service: IBillingService = Depends(get_billing_service),
) -> Plan:
    """Add a plan to the catalog. Admin only."""
    return await service.create_plan(request)


@router.patch("/{plan_id}", response_model=Plan)
async def update_plan(
    plan_id: str,
    request: PlanUpdate,
    admin: CurrentUser = Depends(require_admin),
    service: IBillingService = Depends(get_billing_service),
) -> Plan:
    """Update a plan. Deactivating keeps it on existing subscriptions. Admin only."""
    try:
        return await service.update_plan(plan_id, request)
    except PlanNotFoundError:
        raise HTTPException(status_code=404, detail="Plan not found")
