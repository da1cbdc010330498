"""
Pytest fixtures for LiftLog API tests.

Provides the test app, an authenticated TestClient and fake repositories
wired through FastAPI dependency overrides.
"""

from datetime import date
from typing import Any, Dict, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api import deps
from backend.main import create_app
from backend.settings import Settings
from tests.fakes import (
    FakeUserRepository,
    FakeExerciseRepository,
    FakePlanRepository,
    FakeSessionRepository,
    FakeAchievementRepository,
)


# ---------------------------------------------------------------------------
# Auth Mock
# ---------------------------------------------------------------------------

TEST_USER_ID = "test-user-123"
OTHER_USER_ID = "other-user-456"

# Mon 2024-01-01 .. Sun 2024-01-07; 2024-01-01 is weekday 1 (0=Sunday)
MONDAY = date(2024, 1, 1)


async def mock_get_current_user() -> str:
    """Mock auth dependency that returns a test user."""
    return TEST_USER_ID


# ---------------------------------------------------------------------------
# Mock Environment Variables
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Set mock environment variables for tests."""
    monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "test-supabase-key")
    monkeypatch.setenv("ENVIRONMENT", "test")


# ---------------------------------------------------------------------------
# Fake Repositories
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_user_repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def fake_exercise_repo() -> FakeExerciseRepository:
    return FakeExerciseRepository()


@pytest.fixture
def fake_plan_repo() -> FakePlanRepository:
    return FakePlanRepository()


@pytest.fixture
def fake_session_repo() -> FakeSessionRepository:
    return FakeSessionRepository()


@pytest.fixture
def fake_achievement_repo() -> FakeAchievementRepository:
    return FakeAchievementRepository()


# ---------------------------------------------------------------------------
# Test App and Client
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with minimal configuration."""
    return Settings(
        environment="test",
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-key",
        _env_file=None,
    )


@pytest.fixture
def app(test_settings) -> FastAPI:
    """Create test application instance."""
    return create_app(settings=test_settings)


@pytest.fixture
def app_with_fake_repos(
    app: FastAPI,
    fake_user_repo: FakeUserRepository,
    fake_exercise_repo: FakeExerciseRepository,
    fake_plan_repo: FakePlanRepository,
    fake_session_repo: FakeSessionRepository,
    fake_achievement_repo: FakeAchievementRepository,
) -> Generator[Dict[str, Any], None, None]:
    """
    Override every repository dependency with a fake.

    Yields:
        Dict mapping repository names to fake instances for seeding
    """
    settings = app.state.settings
    app.dependency_overrides[deps.get_settings] = lambda: settings
    app.dependency_overrides[deps.get_current_user] = mock_get_current_user
    app.dependency_overrides[deps.get_user_repo] = lambda: fake_user_repo
    app.dependency_overrides[deps.get_exercise_repo] = lambda: fake_exercise_repo
    app.dependency_overrides[deps.get_plan_repo] = lambda: fake_plan_repo
    app.dependency_overrides[deps.get_session_repo] = lambda: fake_session_repo
    app.dependency_overrides[deps.get_achievement_repo] = lambda: fake_achievement_repo

    yield {
        "user_repo": fake_user_repo,
        "exercise_repo": fake_exercise_repo,
        "plan_repo": fake_plan_repo,
        "session_repo": fake_session_repo,
        "achievement_repo": fake_achievement_repo,
    }

    app.dependency_overrides.clear()


@pytest.fixture
def client(app, app_with_fake_repos) -> Generator[TestClient, None, None]:
    """
    Per-test TestClient authenticated as TEST_USER_ID with fake repositories.
    """
    yield TestClient(app)
