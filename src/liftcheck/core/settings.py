"""Application settings and configuration.

This module defines all configuration options for the LiftCheck service.
Settings are loaded from environment variables with sensible defaults.
"""

from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    This class defines all configuration options for the LiftCheck service.
    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="LiftCheck", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Shared secret guarding the admin endpoints; unset disables them entirely.
    admin_api_secret: str | None = Field(default=None, alias="ADMIN_API_SECRET")

    # Database configuration
    database_url: str = Field(default="sqlite:///./liftcheck.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Optimistic transaction retries (conflicts on versioned rows)
    transaction_max_attempts: int = Field(default=5, ge=1, alias="TRANSACTION_MAX_ATTEMPTS")
    transaction_backoff_seconds: float = Field(
        default=0.02,
        ge=0.0,
        alias="TRANSACTION_BACKOFF_SECONDS",
    )

    # Fixed-window rate limits
    vote_rate_limit: int = Field(default=20, ge=1, alias="VOTE_RATE_LIMIT")
    vote_rate_window_seconds: int = Field(
        default=60 * 60,
        ge=1,
        alias="VOTE_RATE_WINDOW_SECONDS",
    )
    share_rate_limit: int = Field(default=5, ge=1, alias="SHARE_RATE_LIMIT")
    share_rate_window_seconds: int = Field(
        default=24 * 60 * 60,
        ge=1,
        alias="SHARE_RATE_WINDOW_SECONDS",
    )

    # Peer validation policy
    validation_quorum: int = Field(default=5, ge=1, alias="VALIDATION_QUORUM")
    validation_approval_ratio: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        alias="VALIDATION_APPROVAL_RATIO",
    )
    prevent_self_vote: bool = Field(default=True, alias="PREVENT_SELF_VOTE")

    # Leaderboard materialization
    leaderboard_size: int = Field(default=100, ge=1, alias="LEADERBOARD_SIZE")
    leaderboard_refresh_seconds: float = Field(
        default=600.0,
        gt=0,
        alias="LEADERBOARD_REFRESH_SECONDS",
    )
    leaderboard_worker_enabled: bool = Field(default=True, alias="LEADERBOARD_WORKER_ENABLED")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def rate_limit_windows(self) -> dict[str, tuple[int, timedelta]]:
        """Return the configured (limit, window) pair for each rate-limited action."""
        return {
            "vote": (self.vote_rate_limit, timedelta(seconds=self.vote_rate_window_seconds)),
            "share": (self.share_rate_limit, timedelta(seconds=self.share_rate_window_seconds)),
        }


settings = Settings()
