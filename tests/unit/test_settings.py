"""
Unit tests for backend/settings.py
"""

import pytest
from pydantic import ValidationError

from backend.settings import Settings, get_settings


# Environment variables that CI might set which we need to clear for default tests
CI_ENV_VARS = [
    "ENVIRONMENT",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "SUPABASE_ANON_KEY",
    "DEFAULT_REST_SECONDS",
    "TICK_INTERVAL_SECONDS",
    "HISTORY_LOG_LIMIT",
    "PERSIST_INLINE",
    "CORS_ALLOWED_ORIGINS",
    "SENTRY_DSN",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Clear CI environment variables to test true defaults."""
    for var in CI_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.mark.unit
class TestSettingsDefaults:
    """Test that Settings applies correct defaults."""

    def test_environment_default(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.environment == "development"
        assert settings.is_development

    def test_supabase_fields_default_to_none(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.supabase_url is None
        assert settings.supabase_key is None

    def test_engine_defaults(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.default_rest_seconds == 90
        assert settings.tick_interval_seconds == 1.0
        assert settings.history_log_limit == 50
        assert settings.persist_inline is True

    def test_sentry_disabled_by_default(self, clean_env):
        assert Settings(_env_file=None).sentry_dsn is None


@pytest.mark.unit
class TestSettingsFromEnvironment:
    """Test loading values from environment variables."""

    def test_values_from_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "PRODUCTION")
        monkeypatch.setenv("DEFAULT_REST_SECONDS", "120")
        monkeypatch.setenv("PERSIST_INLINE", "false")
        settings = Settings(_env_file=None)
        assert settings.environment == "production"
        assert settings.is_production
        assert settings.default_rest_seconds == 120
        assert settings.persist_inline is False

    def test_service_role_key_preferred(self, clean_env):
        settings = Settings(
            supabase_service_role_key="service",
            supabase_anon_key="anon",
            _env_file=None,
        )
        assert settings.supabase_key == "service"

    def test_anon_key_fallback(self, clean_env):
        settings = Settings(supabase_anon_key="anon", _env_file=None)
        assert settings.supabase_key == "anon"

    def test_cors_origins_list(self, clean_env):
        settings = Settings(cors_allowed_origins=" https://a.app , ,https://b.app", _env_file=None)
        assert settings.cors_origins_list == ["https://a.app", "https://b.app"]


@pytest.mark.unit
class TestSettingsValidation:
    def test_invalid_environment(self, clean_env):
        with pytest.raises(ValidationError):
            Settings(environment="moon", _env_file=None)

    @pytest.mark.parametrize("field", ["default_rest_seconds", "history_log_limit"])
    def test_non_positive_values_rejected(self, clean_env, field):
        with pytest.raises(ValidationError):
            Settings(**{field: 0}, _env_file=None)

    def test_test_environment(self, clean_env):
        assert Settings(environment="test", _env_file=None).is_test


@pytest.mark.unit
class TestGetSettings:
    def test_get_settings_is_cached(self, clean_env):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
