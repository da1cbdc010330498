"""
Infrastructure Layer for the LiftLog API.

This package contains concrete implementations of repository interfaces:
- db/: Supabase database implementations and SQL migrations
"""

# Re-export database repositories for convenient access
from infrastructure.db import (
    SupabaseUserRepository,
    SupabaseExerciseRepository,
    SupabasePlanRepository,
    SupabaseSessionRepository,
    SupabaseAchievementRepository,
)

__all__ = [
    "SupabaseUserRepository",
    "SupabaseExerciseRepository",
    "SupabasePlanRepository",
    "SupabaseSessionRepository",
    "SupabaseAchievementRepository",
]
