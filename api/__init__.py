"""
API package for the LiftLog API.

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_settings,
    get_supabase_client,
    get_supabase_client_required,
    get_user_repo,
    get_exercise_repo,
    get_plan_repo,
    get_session_repo,
    get_achievement_repo,
    get_current_user,
    get_registered_user,
)

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Repositories
    "get_user_repo",
    "get_exercise_repo",
    "get_plan_repo",
    "get_session_repo",
    "get_achievement_repo",
    # Authentication
    "get_current_user",
    "get_registered_user",
]
