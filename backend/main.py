"""
Application factory for FastAPI.

This module provides a factory function for creating FastAPI application instances.
The factory pattern allows for:
- Easy testing with custom settings
- Multiple app instances with different configurations
- Clear separation of app creation from route definitions

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    # Default app (uses get_settings())
    app = create_app()

    # Test app with custom settings
    test_settings = Settings(environment="test", _env_file=None)
    test_app = create_app(settings=test_settings)
"""

import logging
from typing import Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    _init_sentry(settings)

    app = FastAPI(
        title="LiftLog API",
        description="Workout logging, progression analytics and plan-aware streaks",
        version="1.0.0",
    )
    app.state.settings = settings

    _configure_cors(app, settings)
    _include_routers(app)

    logger.info(
        f"LiftLog API created (environment={settings.environment}, "
        f"streak_lookback_days={settings.streak_lookback_days})"
    )
    return app


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,
            profiles_sample_rate=0.1,
        )
        logger.info("Sentry initialized for liftlog-api")


def _configure_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware for the application."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from api.routers import (
        health_router,
        exercises_router,
        plans_router,
        profile_router,
        progression_router,
        sessions_router,
        streaks_router,
    )

    # Health router (no prefix - /health at root)
    app.include_router(health_router)

    app.include_router(profile_router)
    app.include_router(exercises_router)
    app.include_router(plans_router)
    app.include_router(sessions_router)
    app.include_router(progression_router)
    app.include_router(streaks_router)


# Default app instance for uvicorn
# This allows: uvicorn backend.main:app --reload
app = create_app()
