"""
Domain models for the LiftLog API.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services):

- Suggestion: tagged union of progression suggestions
- StreakStatus / PlannedStreak / StreakUpdate: streak engine results
- STREAK_ACHIEVEMENTS: achievement thresholds and labels
- PlanDaySpec / PlanExerciseSpec / PlannedSet: weekly plan structure

Usage:
    >>> from domain.models import IncreaseSuggestion, StreakStatus
    >>> IncreaseSuggestion(amount=5).apply(120)
    125.0
"""

from domain.models.suggestion import (
    Suggestion,
    IncreaseSuggestion,
    DecreaseSuggestion,
    MaintainSuggestion,
    UnknownSuggestion,
)
from domain.models.streak import (
    StreakStatus,
    AchievementDefinition,
    STREAK_ACHIEVEMENTS,
    ACHIEVEMENTS_BY_TYPE,
    PlannedStreak,
    StreakUpdate,
    crossed_thresholds,
)
from domain.models.training import (
    WeightUnit,
    PlannedSet,
    PlanExerciseSpec,
    PlanDaySpec,
)

__all__ = [
    # Suggestions
    "Suggestion",
    "IncreaseSuggestion",
    "DecreaseSuggestion",
    "MaintainSuggestion",
    "UnknownSuggestion",
    # Streaks
    "StreakStatus",
    "AchievementDefinition",
    "STREAK_ACHIEVEMENTS",
    "ACHIEVEMENTS_BY_TYPE",
    "PlannedStreak",
    "StreakUpdate",
    "crossed_thresholds",
    # Plans
    "WeightUnit",
    "PlannedSet",
    "PlanExerciseSpec",
    "PlanDaySpec",
]
