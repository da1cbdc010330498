"""
Sessions router for workout logging.

This router provides endpoints for:
- Starting (get-or-create) the session for a date
- Logging sets (upsert by exercise and set index)
- Completing a session, which updates the streak
- Reading recent sessions and a session by date
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Path
from pydantic import BaseModel, Field

from api.deps import get_current_user, get_registered_user, get_session_service
from application.exceptions import InvalidInputError, NotFoundError
from backend.core.session_service import SessionService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/sessions",
    tags=["Sessions"],
)


# =============================================================================
# Request/Response Models
# =============================================================================


class StartSessionRequest(BaseModel):
    date: date
    plan_id: Optional[str] = None


class SessionApiResponse(BaseModel):
    id: str
    date: str
    weekday: int
    plan_id: Optional[str] = None
    completed_at: Optional[str] = None
    notes: Optional[str] = None


class LogSetRequest(BaseModel):
    exercise_id: str
    set_index: int = Field(..., ge=0)
    reps_actual: int = Field(..., ge=0, le=1000)
    weight: float = Field(..., ge=0)
    rpe: Optional[float] = Field(None, ge=0, le=10)


class SetApiResponse(BaseModel):
    id: Optional[str] = None
    session_id: str
    exercise_id: str
    set_index: int
    reps_actual: int
    weight: float
    rpe: Optional[float] = None


class CompleteSessionRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=2000)


class StreakResultResponse(BaseModel):
    streak: int
    longest_streak: int
    is_workout_day: bool
    new_achievements: List[str] = Field(default_factory=list)


class CompleteSessionResponse(BaseModel):
    success: bool = True
    session_id: str
    newly_completed: bool
    streak_result: Optional[StreakResultResponse] = None


class SessionDetailResponse(SessionApiResponse):
    sets: List[Dict[str, Any]] = Field(default_factory=list)


def _session_response(session: Dict[str, Any]) -> SessionApiResponse:
    return SessionApiResponse(
        id=session["id"],
        date=str(session["date"]),
        weekday=session["weekday"],
        plan_id=session.get("plan_id"),
        completed_at=str(session["completed_at"]) if session.get("completed_at") else None,
        notes=session.get("notes"),
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("", response_model=SessionApiResponse)
def start_session(
    request: StartSessionRequest,
    user_id: str = Depends(get_registered_user),
    service: SessionService = Depends(get_session_service),
) -> SessionApiResponse:
    """
    Get or create the session for a date.

    Calling this repeatedly for the same date returns the same session.
    """
    try:
        session = service.get_or_create_session(user_id, request.date, plan_id=request.plan_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail=f"Plan '{request.plan_id}' not found")
    return _session_response(session)


@router.get("/recent", response_model=List[SessionApiResponse])
def get_recent_sessions(
    limit: int = Query(10, ge=1, le=100),
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> List[SessionApiResponse]:
    """Most recent sessions, newest first."""
    return [_session_response(s) for s in service.get_recent_sessions(user_id, limit=limit)]


@router.get("/by-date/{session_date}", response_model=Optional[SessionDetailResponse])
def get_session_by_date(
    session_date: date = Path(..., description="ISO date (YYYY-MM-DD)"),
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> Optional[SessionDetailResponse]:
    """Get the session for a date with its sets, or null."""
    session = service.get_session_by_date(user_id, session_date)
    if session is None:
        return None
    base = _session_response(session)
    return SessionDetailResponse(**base.model_dump(), sets=session["sets"])


@router.put("/{session_id}/sets", response_model=SetApiResponse)
def log_set(
    request: LogSetRequest,
    session_id: str = Path(...),
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> SetApiResponse:
    """
    Log a set. Logging the same exercise and set index again overwrites it.
    """
    try:
        stored = service.log_set(
            user_id,
            session_id,
            request.exercise_id,
            request.set_index,
            request.reps_actual,
            request.weight,
            rpe=request.rpe,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=f"{e.resource} '{e.identifier}' not found")
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SetApiResponse(**{k: stored.get(k) for k in SetApiResponse.model_fields if k in stored})


@router.post("/{session_id}/complete", response_model=CompleteSessionResponse)
def complete_session(
    request: Optional[CompleteSessionRequest] = None,
    session_id: str = Path(...),
    user_id: str = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> CompleteSessionResponse:
    """
    Mark a session completed.

    Only the first completion updates the streak; repeating the call only
    overwrites the notes and returns a null streak_result.
    """
    notes = request.notes if request else None
    try:
        result = service.complete_session(user_id, session_id, notes=notes)
    except NotFoundError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")

    streak_result = None
    if result.streak_result is not None:
        streak_result = StreakResultResponse(
            streak=result.streak_result.current_streak,
            longest_streak=result.streak_result.longest_streak,
            is_workout_day=result.streak_result.is_workout_day,
            new_achievements=result.streak_result.new_achievements,
        )
    return CompleteSessionResponse(
        session_id=session_id,
        newly_completed=result.newly_completed,
        streak_result=streak_result,
    )
