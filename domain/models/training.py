"""
Training plan value objects.

Weekdays follow the calendar convention 0=Sunday .. 6=Saturday throughout
plans, sessions and streaks.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

WeightUnit = Literal["kg", "lb"]


class PlannedSet(BaseModel):
    """One prescribed set of a plan exercise."""

    reps_target: int = Field(..., ge=1, le=100)
    notes: Optional[str] = None


class PlanExerciseSpec(BaseModel):
    exercise_id: str
    order: int = Field(default=0, ge=0)
    sets: List[PlannedSet] = Field(default_factory=list)
    rest_seconds: Optional[int] = Field(default=None, ge=0)


class PlanDaySpec(BaseModel):
    """
    One weekday of a weekly plan.

    ``weekday`` is range-checked by PlanService, not here.
    """

    weekday: int
    name: Optional[str] = None
    exercises: List[PlanExerciseSpec] = Field(default_factory=list)
