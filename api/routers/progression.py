"""
Progression router for exercise history, statistics and suggestions.

This router provides endpoints for:
- Exercise history with top set, volume and estimated 1RM per session
- Weekly training summaries
- Dashboard statistics for every logged exercise
- Progression suggestions (single and batch)
- Last logged weights for pre-filling the logging form
"""
from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Path
from pydantic import BaseModel, Field

from api.deps import get_current_user, get_progression_service, get_suggestion_service
from application.exceptions import NotFoundError
from backend.core.progression_service import ProgressionService
from backend.core.suggestion_service import SuggestionService
from domain.models.suggestion import UnknownSuggestion

router = APIRouter(
    prefix="/progression",
    tags=["Progression"],
)


# =============================================================================
# Request/Response Models
# =============================================================================


class SetResponse(BaseModel):
    """A logged set."""
    id: Optional[str] = None
    set_index: int
    reps_actual: int
    weight: float
    rpe: Optional[float] = None


class HistoryPointResponse(BaseModel):
    """One session's performance on an exercise."""
    date: str
    session_id: str
    top_set_weight: float
    top_set_reps: int
    total_volume: float
    estimated_1rm: float
    set_count: int
    sets: List[SetResponse] = Field(default_factory=list)


class ExerciseHistoryApiResponse(BaseModel):
    exercise_id: str
    exercise_name: str
    days: int
    history: List[HistoryPointResponse]


class WeeklySummaryResponse(BaseModel):
    week_start: str
    session_count: int
    completed_sessions: int
    total_volume: float
    unique_exercises: int


class ExerciseStatsResponse(BaseModel):
    exercise_id: str
    exercise_name: str
    muscle_group: Optional[str] = None
    last_weight: float
    last_date: str
    session_count: int
    total_volume: float
    best_weight: float
    best_weight_date: str
    oldest_weight: float
    recent_pr: bool


class SuggestionApiResponse(BaseModel):
    """
    Suggestion for a single exercise.

    ``suggestion`` is null when there are fewer than two sessions to compare.
    """
    exercise_id: str
    suggestion: Optional[str] = Field(None, description="increase | decrease | maintain")
    reason: str
    amount: Optional[float] = None
    last_weight: Optional[float] = None


class ExerciseIdsRequest(BaseModel):
    exercise_ids: List[str] = Field(..., min_length=1, max_length=100)


class BatchSuggestionItem(BaseModel):
    suggestion: Optional[str] = None
    suggested_weight: Optional[float] = None
    last_weight: Optional[float] = None


class LastWeightSet(BaseModel):
    set_index: int
    weight: float
    reps_actual: int


class LastWeightItem(BaseModel):
    date: str
    session_id: str
    sets: List[LastWeightSet]


def _action(suggestion) -> Optional[str]:
    if isinstance(suggestion, UnknownSuggestion):
        return None
    return suggestion.action


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/exercises/{exercise_id}/history", response_model=ExerciseHistoryApiResponse)
def get_exercise_history(
    exercise_id: str = Path(..., description="Exercise ID"),
    days: int = Query(90, ge=1, le=3650, description="Lookback window in days"),
    user_id: str = Depends(get_current_user),
    service: ProgressionService = Depends(get_progression_service),
) -> ExerciseHistoryApiResponse:
    """
    Get the history of a specific exercise.

    Returns one point per session that contains the exercise, ordered by
    date ascending. Sessions without the exercise are omitted.
    """
    try:
        result = service.get_exercise_history(user_id, exercise_id, days=days)
    except NotFoundError:
        raise HTTPException(status_code=404, detail=f"Exercise '{exercise_id}' not found")

    return ExerciseHistoryApiResponse(**asdict(result))


@router.get("/weekly-summary", response_model=List[WeeklySummaryResponse])
def get_weekly_summary(
    weeks: int = Query(8, ge=1, le=104, description="Lookback in weeks"),
    user_id: str = Depends(get_current_user),
    service: ProgressionService = Depends(get_progression_service),
) -> List[WeeklySummaryResponse]:
    """Get Monday-start weekly totals, oldest week first."""
    return [
        WeeklySummaryResponse(**asdict(w))
        for w in service.get_weekly_summary(user_id, weeks=weeks)
    ]


@router.get("/stats", response_model=List[ExerciseStatsResponse])
def get_all_exercise_stats(
    user_id: str = Depends(get_current_user),
    service: ProgressionService = Depends(get_progression_service),
) -> List[ExerciseStatsResponse]:
    """Get per-exercise statistics, most recently trained first."""
    return [
        ExerciseStatsResponse(**asdict(s))
        for s in service.get_all_exercise_stats(user_id)
    ]


@router.get("/exercises/{exercise_id}/suggestion", response_model=SuggestionApiResponse)
def get_exercise_suggestion(
    exercise_id: str = Path(..., description="Exercise ID"),
    user_id: str = Depends(get_current_user),
    service: SuggestionService = Depends(get_suggestion_service),
) -> SuggestionApiResponse:
    """
    Suggest whether to increase, decrease or keep the working weight.
    """
    result = service.get_exercise_suggestions(user_id, exercise_id)
    return SuggestionApiResponse(
        exercise_id=exercise_id,
        suggestion=_action(result.suggestion),
        reason=result.reason,
        amount=result.amount,
        last_weight=result.last_weight,
    )


@router.post("/suggestions/batch", response_model=Dict[str, BatchSuggestionItem])
def get_batch_suggestions(
    request: ExerciseIdsRequest,
    user_id: str = Depends(get_current_user),
    service: SuggestionService = Depends(get_suggestion_service),
) -> Dict[str, BatchSuggestionItem]:
    """Suggest the next weight for several exercises in one call."""
    results = service.get_batch_exercise_suggestions(user_id, request.exercise_ids)
    return {
        exercise_id: BatchSuggestionItem(
            suggestion=_action(item.suggestion),
            suggested_weight=item.suggested_weight,
            last_weight=item.last_weight,
        )
        for exercise_id, item in results.items()
    }


@router.post("/last-weights", response_model=Dict[str, LastWeightItem])
def get_last_weights(
    request: ExerciseIdsRequest,
    user_id: str = Depends(get_current_user),
    service: SuggestionService = Depends(get_suggestion_service),
) -> Dict[str, LastWeightItem]:
    """
    Get the per-set weights of the last completed session of each exercise.

    Exercises without completed history are omitted from the response.
    """
    return {
        exercise_id: LastWeightItem(**data)
        for exercise_id, data in service.get_last_weights(user_id, request.exercise_ids).items()
    }
