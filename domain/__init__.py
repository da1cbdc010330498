"""
Domain layer for the LiftLog API.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).
"""

from domain.models import (
    Suggestion,
    StreakStatus,
    PlanDaySpec,
)

__all__ = [
    "Suggestion",
    "StreakStatus",
    "PlanDaySpec",
]
