"""
LiftLog API settings, read from the environment (and .env) by pydantic-settings.

Every tunable lives on Settings: Supabase credentials, auth (Clerk, API keys,
the E2E bypass secret), CORS, Sentry and the streak engine knobs.

Usage:
    from backend.settings import get_settings

    settings = get_settings()
    lookback = settings.streak_lookback_days

    # Inside a router, through api.deps
    def handler(settings: Settings = Depends(get_settings)): ...
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENVIRONMENTS = frozenset({"development", "staging", "production", "test"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="One of development, staging, production, test",
    )

    # -------------------------------------------------------------------------
    # Supabase
    # -------------------------------------------------------------------------
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (full access)",
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anonymous key (limited access)",
    )

    @property
    def supabase_key(self) -> Optional[str]:
        """Service role key when set, else the anon key."""
        return self.supabase_service_role_key or self.supabase_anon_key

    # -------------------------------------------------------------------------
    # Authentication - Clerk JWTs
    # -------------------------------------------------------------------------
    clerk_domain: str = Field(
        default="",
        description="Clerk frontend API domain; JWKS are fetched from https://<domain>/.well-known/jwks.json",
    )

    # -------------------------------------------------------------------------
    # Authentication - API keys
    # -------------------------------------------------------------------------
    api_keys: str = Field(
        default="",
        description="Comma-separated list of valid API keys",
    )

    @property
    def api_keys_list(self) -> list[str]:
        """Configured API keys, blanks dropped."""
        return [k.strip() for k in self.api_keys.split(",") if k.strip()]

    # -------------------------------------------------------------------------
    # Testing
    # -------------------------------------------------------------------------
    test_auth_secret: str = Field(
        default="",
        description="Shared secret for the X-Test-Auth bypass (ignored in production)",
    )

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------
    cors_allowed_origins: str = Field(
        default="",
        description="Comma-separated extra origins allowed by CORS",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Local dev origins plus any configured extras."""
        origins = ["http://localhost:3000", "http://localhost:3001"]
        origins.extend(o.strip() for o in self.cors_allowed_origins.split(",") if o.strip())
        return origins

    # -------------------------------------------------------------------------
    # Streaks
    # -------------------------------------------------------------------------
    streak_lookback_days: int = Field(
        default=730,
        ge=7,
        description="Maximum number of calendar days a streak walk looks back",
    )
    default_weekly_goal: int = Field(
        default=3,
        ge=1,
        le=7,
        description="Weekly workout goal reported for users who never set one",
    )

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Lower-case and check against the known environments."""
        env = v.lower()
        if env not in ENVIRONMENTS:
            raise ValueError(f"Unknown environment '{v}', expected one of {sorted(ENVIRONMENTS)}")
        return env

    # -------------------------------------------------------------------------
    # Environment checks
    # -------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        return self.environment == "test"


@lru_cache
def get_settings() -> Settings:
    """
    Settings loaded once per process.

    Tests that change environment variables call get_settings.cache_clear().
    """
    return Settings()
