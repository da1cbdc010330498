"""
Streaks router.

This router provides endpoints for:
- Current/longest streak and weekly progress
- Read-only streak status (none, completed, at_risk, broken)
- Weekly goal updates
- Unlocked achievements
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api.deps import get_current_user, get_registered_user, get_streak_service
from application.exceptions import InvalidInputError
from backend.core.streak_service import StreakService
from domain.models.streak import StreakStatus

router = APIRouter(
    prefix="/streaks",
    tags=["Streaks"],
)


# =============================================================================
# Request/Response Models
# =============================================================================


class StreakDataApiResponse(BaseModel):
    current_streak: int
    longest_streak: int
    last_workout_date: Optional[str] = None
    weekly_goal: int
    weekly_completed: int


class StreakStatusApiResponse(BaseModel):
    status: StreakStatus
    streak: int


class WeeklyGoalRequest(BaseModel):
    goal: int = Field(..., description="Workouts per week (1-7)")


class WeeklyGoalResponse(BaseModel):
    success: bool = True
    weekly_goal: int


class AchievementResponse(BaseModel):
    id: Optional[str] = None
    type: str
    label: str
    description: Optional[str] = None
    unlocked_at: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=StreakDataApiResponse)
def get_streak_data(
    user_id: str = Depends(get_current_user),
    service: StreakService = Depends(get_streak_service),
) -> StreakDataApiResponse:
    """Get streak counters and this week's completed sessions."""
    data = service.get_streak_data(user_id)
    return StreakDataApiResponse(
        current_streak=data.current_streak,
        longest_streak=data.longest_streak,
        last_workout_date=data.last_workout_date,
        weekly_goal=data.weekly_goal,
        weekly_completed=data.weekly_completed,
    )


@router.get("/status", response_model=StreakStatusApiResponse)
def get_streak_status(
    user_id: str = Depends(get_current_user),
    service: StreakService = Depends(get_streak_service),
) -> StreakStatusApiResponse:
    """
    Classify today's streak state.

    Rest days never report ``broken`` while a streak is carrying through.
    """
    result = service.get_streak_status(user_id)
    return StreakStatusApiResponse(status=result.status, streak=result.streak)


@router.put("/weekly-goal", response_model=WeeklyGoalResponse)
def set_weekly_goal(
    request: WeeklyGoalRequest,
    user_id: str = Depends(get_registered_user),
    service: StreakService = Depends(get_streak_service),
) -> WeeklyGoalResponse:
    """Set the weekly workout goal."""
    try:
        service.set_weekly_goal(user_id, request.goal)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return WeeklyGoalResponse(weekly_goal=request.goal)


@router.get("/achievements", response_model=List[AchievementResponse])
def get_achievements(
    user_id: str = Depends(get_current_user),
    service: StreakService = Depends(get_streak_service),
) -> List[AchievementResponse]:
    """List unlocked achievements with display labels."""
    return [
        AchievementResponse(
            id=a.get("id"),
            type=a["type"],
            label=a["label"],
            description=a.get("description"),
            unlocked_at=str(a["unlocked_at"]) if a.get("unlocked_at") else None,
            metadata=a.get("metadata"),
        )
        for a in service.get_achievements(user_id)
    ]
