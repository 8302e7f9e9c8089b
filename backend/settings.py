"""
Session engine configuration.

Values come from the process environment or a local ``.env`` file and are
validated once at startup. Inject them with ``Depends(get_settings)``; tests
build ``Settings(environment="test", _env_file=None)`` directly.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENVIRONMENTS = ("development", "staging", "production", "test")


class Settings(BaseSettings):
    """Typed view of the service environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="One of: " + ", ".join(ENVIRONMENTS),
    )

    # Supabase: athlete_schedule, assigned_plans, workout_logs, goals
    supabase_url: Optional[str] = Field(default=None, description="Project URL")
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Service role key; bypasses row level security",
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Anon key, used when no service role key is set",
    )

    # Engine tuning
    default_rest_seconds: int = Field(
        default=90,
        gt=0,
        description="Rest countdown preset when a set prescribes no rest",
    )
    tick_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Interval of the block and rest tickers",
    )
    history_log_limit: int = Field(
        default=50,
        gt=0,
        description="Workout log rows read for history/PB annotations",
    )
    persist_inline: bool = Field(
        default=True,
        description="Flush queued writes at the end of every transition",
    )

    # HTTP and error tracking
    cors_allowed_origins: str = Field(
        default="",
        description="Comma-separated origins allowed besides local dev servers",
    )
    sentry_dsn: Optional[str] = Field(default=None, description="Sentry DSN; unset disables Sentry")

    @field_validator("environment")
    @classmethod
    def _known_environment(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ENVIRONMENTS:
            raise ValueError(f"environment must be one of {ENVIRONMENTS}, got '{value}'")
        return value

    @property
    def supabase_key(self) -> Optional[str]:
        """Service role key if configured, else the anon key."""
        return self.supabase_service_role_key or self.supabase_anon_key

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

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
    """Process-wide Settings; call ``get_settings.cache_clear()`` to reload."""
    return Settings()
