"""
FastAPI Dependency Providers for the LiftLog API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations. This
enables clean separation of concerns and easy testing with fake implementations.

Architecture:
- Settings and Supabase client are cached per-process (lru_cache)
- Repository and service providers create new instances per-request
- Auth providers wrap the Clerk/API key logic in backend.auth

Usage in routers:
    from api.deps import get_current_user, get_streak_service
    from backend.core.streak_service import StreakService

    @router.get("/streaks")
    def streaks(
        user_id: str = Depends(get_current_user),
        service: StreakService = Depends(get_streak_service),
    ):
        return service.get_streak_data(user_id)

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_session_repo] = lambda: FakeSessionRepository()
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException
from supabase import Client, create_client

# Protocol types (interfaces)
from application.ports import (
    UserRepository,
    ExerciseRepository,
    PlanRepository,
    SessionRepository,
    AchievementRepository,
)

# Concrete implementations
from infrastructure import (
    SupabaseUserRepository,
    SupabaseExerciseRepository,
    SupabasePlanRepository,
    SupabaseSessionRepository,
    SupabaseAchievementRepository,
)

# Services
from backend.core.plan_service import PlanService
from backend.core.progression_service import ProgressionService
from backend.core.session_service import SessionService
from backend.core.streak_service import StreakService
from backend.core.suggestion_service import SuggestionService

from backend.settings import Settings, get_settings as _get_settings

# Auth (wrap to maintain single source of truth)
from backend.auth import (
    get_current_user as _get_current_user,
)


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Creates a Supabase client using credentials from settings.
    Returns None if credentials are not configured.

    Returns:
        Client: Supabase client instance, or None if not configured
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Use this dependency when the endpoint requires database access.

    Returns:
        Client: Supabase client instance

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Repository Providers
# =============================================================================


def get_user_repo(
    client: Client = Depends(get_supabase_client_required),
) -> UserRepository:
    """
    Get UserRepository implementation.

    The return type is the Protocol to enable easy faking.

    Args:
        client: Supabase client (injected)

    Returns:
        UserRepository: Repository for user profiles and streak counters
    """
    return SupabaseUserRepository(client)


def get_exercise_repo(
    client: Client = Depends(get_supabase_client_required),
) -> ExerciseRepository:
    """Global catalog plus per-user custom exercises."""
    return SupabaseExerciseRepository(client)


def get_plan_repo(
    client: Client = Depends(get_supabase_client_required),
) -> PlanRepository:
    """Weekly plans; multi-row writes go through the plan RPC functions."""
    return SupabasePlanRepository(client)


def get_session_repo(
    client: Client = Depends(get_supabase_client_required),
) -> SessionRepository:
    return SupabaseSessionRepository(client)


def get_achievement_repo(
    client: Client = Depends(get_supabase_client_required),
) -> AchievementRepository:
    return SupabaseAchievementRepository(client)


# =============================================================================
# Service Providers
# =============================================================================


def get_streak_service(
    user_repo: UserRepository = Depends(get_user_repo),
    session_repo: SessionRepository = Depends(get_session_repo),
    plan_repo: PlanRepository = Depends(get_plan_repo),
    achievement_repo: AchievementRepository = Depends(get_achievement_repo),
    settings: Settings = Depends(get_settings),
) -> StreakService:
    """Get StreakService with injected repositories and streak settings."""
    return StreakService(
        user_repo,
        session_repo,
        plan_repo,
        achievement_repo,
        max_lookback_days=settings.streak_lookback_days,
        default_weekly_goal=settings.default_weekly_goal,
    )


def get_session_service(
    session_repo: SessionRepository = Depends(get_session_repo),
    plan_repo: PlanRepository = Depends(get_plan_repo),
    exercise_repo: ExerciseRepository = Depends(get_exercise_repo),
    streak_service: StreakService = Depends(get_streak_service),
) -> SessionService:
    """Get SessionService with injected repositories."""
    return SessionService(session_repo, plan_repo, exercise_repo, streak_service)


def get_plan_service(
    plan_repo: PlanRepository = Depends(get_plan_repo),
    exercise_repo: ExerciseRepository = Depends(get_exercise_repo),
) -> PlanService:
    """Get PlanService with injected repositories."""
    return PlanService(plan_repo, exercise_repo)


def get_progression_service(
    session_repo: SessionRepository = Depends(get_session_repo),
    exercise_repo: ExerciseRepository = Depends(get_exercise_repo),
) -> ProgressionService:
    """Get ProgressionService with injected repositories."""
    return ProgressionService(session_repo, exercise_repo)


def get_suggestion_service(
    session_repo: SessionRepository = Depends(get_session_repo),
    exercise_repo: ExerciseRepository = Depends(get_exercise_repo),
    user_repo: UserRepository = Depends(get_user_repo),
) -> SuggestionService:
    """Get SuggestionService with injected repositories."""
    return SuggestionService(session_repo, exercise_repo, user_repo)


# =============================================================================
# Authentication Providers
# =============================================================================


async def get_current_user(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
    x_test_auth: Optional[str] = Header(None, alias="X-Test-Auth"),
    x_test_user_id: Optional[str] = Header(None, alias="X-Test-User-Id"),
) -> str:
    """
    Get the current authenticated user ID.

    Wraps backend.auth.get_current_user for dependency injection.
    Supports multiple auth methods:
    - Clerk JWT (RS256 via JWKS)
    - API key authentication
    - E2E test bypass (non-production only)

    Args:
        authorization: Bearer token header
        x_api_key: API key header
        x_test_auth: Test auth secret (non-production only)
        x_test_user_id: Test user ID (non-production only)

    Returns:
        str: User ID from authentication

    Raises:
        HTTPException: 401 if authentication fails
    """
    return await _get_current_user(
        authorization=authorization,
        x_api_key=x_api_key,
        x_test_auth=x_test_auth,
        x_test_user_id=x_test_user_id,
    )


def get_registered_user(
    user_id: str = Depends(get_current_user),
    user_repo: UserRepository = Depends(get_user_repo),
) -> str:
    """
    Get the current user ID, creating the user record on first access.

    Use on endpoints that write rows referencing the user.
    """
    user_repo.get_or_create(user_id)
    return user_id


# =============================================================================
# Exports
# =============================================================================

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
    # Services
    "get_streak_service",
    "get_session_service",
    "get_plan_service",
    "get_progression_service",
    "get_suggestion_service",
    # Authentication
    "get_current_user",
    "get_registered_user",
]
