"""
Fake Repository Implementations for Testing.

This package provides in-memory fake implementations of repository interfaces
for fast, isolated testing. No database or external dependencies required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Factory functions for common test scenarios

Usage:
    from tests.fakes import FakePlanRepository, create_plan_repo

    # Direct instantiation
    repo = FakePlanRepository()

    # Factory function with a Mon/Wed/Fri plan
    repo = create_plan_repo(user_id="user1", workout_weekdays=[1, 3, 5])
"""
from typing import Iterable, Optional

from tests.fakes.user_repository import FakeUserRepository
from tests.fakes.exercise_repository import FakeExerciseRepository, DEFAULT_TEST_EXERCISES
from tests.fakes.plan_repository import FakePlanRepository
from tests.fakes.session_repository import FakeSessionRepository
from tests.fakes.achievement_repository import FakeAchievementRepository


# =============================================================================
# Factory Functions
# =============================================================================


def create_plan_repo(
    *,
    user_id: str = "test_user",
    workout_weekdays: Iterable[int] = (),
    rest_weekdays: Iterable[int] = (),
    exercise_id: str = "bench",
    name: str = "Test Plan",
) -> FakePlanRepository:
    """
    Create a FakePlanRepository holding one active plan.

    Args:
        user_id: Plan owner
        workout_weekdays: Weekdays (0=Sunday) with one exercise each
        rest_weekdays: Weekdays present in the plan but with no exercises
        exercise_id: Exercise scheduled on workout days
        name: Plan name

    Returns:
        Pre-populated FakePlanRepository
    """
    repo = FakePlanRepository()
    days = [
        {
            "weekday": weekday,
            "name": f"Day {weekday}",
            "exercises": [{
                "exercise_id": exercise_id,
                "order": 0,
                "sets": [{"reps_target": 8}] * 3,
                "rest_seconds": 90,
            }],
        }
        for weekday in workout_weekdays
    ]
    days += [
        {"weekday": weekday, "name": "Rest", "exercises": []}
        for weekday in rest_weekdays
    ]
    repo.create_plan_atomic(user_id, name=name, days=days)
    return repo


def create_user_repo(
    *,
    user_id: str = "test_user",
    units: str = "lb",
    current_streak: int = 0,
    longest_streak: int = 0,
    last_workout_date: Optional[str] = None,
) -> FakeUserRepository:
    """Create a FakeUserRepository with one user."""
    repo = FakeUserRepository()
    repo.seed([{
        "id": user_id,
        "units": units,
        "current_streak": current_streak,
        "longest_streak": longest_streak,
        "last_workout_date": last_workout_date,
    }])
    return repo


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Fake implementations
    "FakeUserRepository",
    "FakeExerciseRepository",
    "FakePlanRepository",
    "FakeSessionRepository",
    "FakeAchievementRepository",
    "DEFAULT_TEST_EXERCISES",
    # Factory functions
    "create_plan_repo",
    "create_user_repo",
]
