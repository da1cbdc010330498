"""
Infrastructure Database Layer.

This package provides Supabase-backed implementations of the repository interfaces
defined in application.ports. These implementations can be injected into services
and routers for clean separation of concerns and testability.

The schema and the plan RPC functions live in migrations/.

Usage:
    from supabase import create_client
    from infrastructure.db import (
        SupabaseUserRepository,
        SupabaseSessionRepository,
        SupabasePlanRepository,
    )

    # Create Supabase client
    client = create_client(SUPABASE_URL, SUPABASE_KEY)

    # Instantiate repositories with injected client
    user_repo = SupabaseUserRepository(client)
    session_repo = SupabaseSessionRepository(client)
    plan_repo = SupabasePlanRepository(client)
"""

from infrastructure.db.user_repository import SupabaseUserRepository
from infrastructure.db.exercise_repository import SupabaseExerciseRepository
from infrastructure.db.plan_repository import SupabasePlanRepository
from infrastructure.db.session_repository import SupabaseSessionRepository
from infrastructure.db.achievement_repository import SupabaseAchievementRepository

__all__ = [
    # User profiles and stored streak counters
    "SupabaseUserRepository",

    # Exercise catalog
    "SupabaseExerciseRepository",

    # Weekly plans
    "SupabasePlanRepository",

    # Sessions and logged sets
    "SupabaseSessionRepository",

    # Streak achievements
    "SupabaseAchievementRepository",
]
