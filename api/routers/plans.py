"""
Plans router for weekly training plans.

Weekdays are 0=Sunday .. 6=Saturday. Creating a plan makes it the active
plan; a user has at most one active plan at a time.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Path
from pydantic import BaseModel, Field

from api.deps import get_current_user, get_registered_user, get_plan_service
from application.exceptions import InvalidInputError, NotFoundError, PlanPersistenceError
from backend.core.plan_service import PlanService
from domain.models.training import PlanDaySpec

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/plans",
    tags=["Plans"],
)


class PlanNotFoundError(HTTPException):
    """Plan missing or owned by another user (both reported as 404)."""

    def __init__(self, plan_id: str):
        super().__init__(status_code=404, detail=f"Plan '{plan_id}' not found")


# =============================================================================
# Request/Response Models
# =============================================================================


class CreatePlanRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    days: List[PlanDaySpec] = Field(default_factory=list, max_length=7)


class UpdatePlanRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    days: List[PlanDaySpec] = Field(default_factory=list, max_length=7)


class PlanSummaryResponse(BaseModel):
    id: str
    name: str
    active: bool
    plan_version: int
    created_at: Optional[str] = None


class PlanDetailResponse(PlanSummaryResponse):
    days: List[Dict[str, Any]] = Field(default_factory=list)


class TodayTemplateResponse(BaseModel):
    plan: PlanSummaryResponse
    day: Optional[Dict[str, Any]] = None
    exercises: List[Dict[str, Any]] = Field(default_factory=list)


def _summary(plan: Dict[str, Any]) -> PlanSummaryResponse:
    return PlanSummaryResponse(
        id=plan["id"],
        name=plan["name"],
        active=bool(plan.get("active")),
        plan_version=plan.get("plan_version", 1),
        created_at=str(plan["created_at"]) if plan.get("created_at") else None,
    )


def _detail(plan: Dict[str, Any]) -> PlanDetailResponse:
    return PlanDetailResponse(**_summary(plan).model_dump(), days=plan.get("days", []))


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=List[PlanSummaryResponse])
def list_plans(
    user_id: str = Depends(get_current_user),
    service: PlanService = Depends(get_plan_service),
) -> List[PlanSummaryResponse]:
    return [_summary(p) for p in service.list_plans(user_id)]


@router.post("", response_model=PlanDetailResponse, status_code=201)
def create_plan(
    request: CreatePlanRequest,
    user_id: str = Depends(get_registered_user),
    service: PlanService = Depends(get_plan_service),
) -> PlanDetailResponse:
    """
    Create a plan and make it the active plan.

    All days and exercises are written in one transaction.
    """
    try:
        plan = service.create_plan(user_id, request.name, request.days)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PlanPersistenceError as e:
        logger.error(f"Plan creation failed for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create plan")
    return _detail(plan)


@router.get("/active", response_model=Optional[PlanDetailResponse])
def get_active_plan(
    user_id: str = Depends(get_current_user),
    service: PlanService = Depends(get_plan_service),
) -> Optional[PlanDetailResponse]:
    """Get the active plan with its days, or null."""
    plan = service.get_active_plan(user_id)
    return _detail(plan) if plan else None


@router.get("/today", response_model=Optional[TodayTemplateResponse])
def get_today_template(
    on: Optional[date] = Query(None, alias="date", description="Defaults to today"),
    user_id: str = Depends(get_current_user),
    service: PlanService = Depends(get_plan_service),
) -> Optional[TodayTemplateResponse]:
    """
    Get the active plan's exercises for a date's weekday.

    Returns null without an active plan, and an empty exercise list on a
    rest day.
    """
    template = service.get_today_template(user_id, on or date.today())
    if template is None:
        return None
    return TodayTemplateResponse(
        plan=_summary(template["plan"]),
        day=template["day"],
        exercises=template["exercises"],
    )


@router.get("/{plan_id}", response_model=PlanDetailResponse)
def get_plan(
    plan_id: str = Path(...),
    user_id: str = Depends(get_current_user),
    service: PlanService = Depends(get_plan_service),
) -> PlanDetailResponse:
    try:
        return _detail(service.get_plan(user_id, plan_id))
    except NotFoundError:
        raise PlanNotFoundError(plan_id)


@router.put("/{plan_id}", response_model=PlanDetailResponse)
def update_plan(
    request: UpdatePlanRequest,
    plan_id: str = Path(...),
    user_id: str = Depends(get_current_user),
    service: PlanService = Depends(get_plan_service),
) -> PlanDetailResponse:
    """Replace the plan's days wholesale (and optionally rename it)."""
    try:
        plan = service.update_plan_days(user_id, plan_id, request.days, name=request.name)
    except NotFoundError:
        raise PlanNotFoundError(plan_id)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PlanPersistenceError as e:
        logger.error(f"Plan update failed for {plan_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update plan")
    return _detail(plan)


@router.post("/{plan_id}/activate", response_model=PlanSummaryResponse)
def activate_plan(
    plan_id: str = Path(...),
    user_id: str = Depends(get_current_user),
    service: PlanService = Depends(get_plan_service),
) -> PlanSummaryResponse:
    """Make this the user's only active plan."""
    try:
        plan = service.set_active_plan(user_id, plan_id)
    except NotFoundError:
        raise PlanNotFoundError(plan_id)
    except PlanPersistenceError as e:
        logger.error(f"Plan activation failed for {plan_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to activate plan")
    return _summary(plan)


@router.delete("/{plan_id}", status_code=204)
def delete_plan(
    plan_id: str = Path(...),
    user_id: str = Depends(get_current_user),
    service: PlanService = Depends(get_plan_service),
) -> None:
    try:
        service.delete_plan(user_id, plan_id)
    except NotFoundError:
        raise PlanNotFoundError(plan_id)
