"""
Exercises router for the exercise catalog.

This router provides endpoints for:
- Listing global exercises plus the user's custom exercises
- Creating a custom exercise
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.deps import get_current_user, get_exercise_repo, get_registered_user
from application.ports import ExerciseRepository

router = APIRouter(
    prefix="/exercises",
    tags=["Exercises"],
)


# =============================================================================
# Request/Response Models
# =============================================================================


class CreateExerciseRequest(BaseModel):
    """Request model for a custom exercise."""
    name: str = Field(..., min_length=1, max_length=200)
    muscle_group: Optional[str] = Field(None, max_length=100)
    equipment: Optional[str] = Field(None, max_length=100)


class ExerciseResponse(BaseModel):
    """Response model for a single exercise."""
    id: str
    name: str
    muscle_group: Optional[str] = None
    equipment: Optional[str] = None
    is_global: bool = False


def _exercise_response(row) -> ExerciseResponse:
    return ExerciseResponse(
        id=row["id"],
        name=row["name"],
        muscle_group=row.get("muscle_group"),
        equipment=row.get("equipment"),
        is_global=bool(row.get("is_global")),
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=List[ExerciseResponse])
def list_exercises(
    user_id: str = Depends(get_current_user),
    repo: ExerciseRepository = Depends(get_exercise_repo),
) -> List[ExerciseResponse]:
    """
    List exercises visible to the user, sorted by name.

    Includes the global catalog and the user's own custom exercises.
    """
    return [_exercise_response(row) for row in repo.list_available(user_id)]


@router.post("", response_model=ExerciseResponse, status_code=201)
def create_exercise(
    request: CreateExerciseRequest,
    user_id: str = Depends(get_registered_user),
    repo: ExerciseRepository = Depends(get_exercise_repo),
) -> ExerciseResponse:
    """Create a custom exercise visible only to this user."""
    row = repo.create_custom(
        user_id,
        name=request.name.strip(),
        muscle_group=request.muscle_group,
        equipment=request.equipment,
    )
    return _exercise_response(row)
