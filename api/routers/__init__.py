"""
Router package for the LiftLog API.

This package contains all API routers organized by domain:
- health: Liveness check
- exercises: Exercise catalog (global + custom)
- plans: Weekly training plans and today's template
- profile: User profile and weight unit
- progression: History, stats, weekly summaries and suggestions
- sessions: Session logging and completion
- streaks: Plan-aware streaks, weekly goal and achievements
"""

from api.routers.health import router as health_router
from api.routers.exercises import router as exercises_router
from api.routers.plans import router as plans_router
from api.routers.profile import router as profile_router
from api.routers.progression import router as progression_router
from api.routers.sessions import router as sessions_router
from api.routers.streaks import router as streaks_router

__all__ = [
    "health_router",
    "exercises_router",
    "plans_router",
    "profile_router",
    "progression_router",
    "sessions_router",
    "streaks_router",
]
