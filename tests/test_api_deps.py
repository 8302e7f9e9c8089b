"""
Unit tests for api/deps.py dependency providers.

These tests verify that the dependency providers are properly wired and
return the correct types. Uses mocks for external dependencies.
"""

import pytest
from fastapi import HTTPException
from unittest.mock import MagicMock, patch

# All tests in this module are pure logic tests with mocks - mark as unit
pytestmark = pytest.mark.unit


# =============================================================================
# Import Tests
# =============================================================================


class TestDepsImports:
    """Test that all dependency providers can be imported."""

    def test_import_providers(self):
        """Every provider listed in __all__ should be importable."""
        import api.deps as deps

        for name in deps.__all__:
            assert callable(getattr(deps, name)), name


# =============================================================================
# Supabase Client Tests
# =============================================================================


class TestSupabaseClient:
    def test_client_required_raises_503_when_not_configured(self):
        from api.deps import get_supabase_client_required

        with patch("api.deps.get_supabase_client", return_value=None):
            with pytest.raises(HTTPException) as exc_info:
                get_supabase_client_required()

        assert exc_info.value.status_code == 503
        assert "not configured" in exc_info.value.detail

    def test_client_required_returns_client(self):
        from api.deps import get_supabase_client_required

        client = MagicMock()
        with patch("api.deps.get_supabase_client", return_value=client):
            assert get_supabase_client_required() is client

    def test_client_is_none_without_credentials(self):
        from api.deps import get_supabase_client
        from backend.settings import Settings

        get_supabase_client.cache_clear()
        try:
            with patch("api.deps._get_settings", return_value=Settings(_env_file=None, supabase_url=None)):
                assert get_supabase_client() is None
        finally:
            get_supabase_client.cache_clear()

    def test_client_created_from_settings(self):
        from api.deps import get_supabase_client
        from backend.settings import Settings

        settings = Settings(
            _env_file=None,
            supabase_url="https://example.supabase.co",
            supabase_service_role_key="service-key",
        )
        get_supabase_client.cache_clear()
        try:
            with patch("api.deps._get_settings", return_value=settings), \
                    patch("api.deps.create_client") as mock_create:
                get_supabase_client()
            mock_create.assert_called_once_with("https://example.supabase.co", "service-key")
        finally:
            get_supabase_client.cache_clear()


# =============================================================================
# Repository Provider Tests
# =============================================================================


class TestRepositoryProviders:
    """Providers wrap the injected client in the Supabase adapters."""

    def test_schedule_repo(self):
        from api.deps import get_schedule_repo
        from infrastructure import SupabaseScheduleRepository

        assert isinstance(get_schedule_repo(client=MagicMock()), SupabaseScheduleRepository)

    def test_assigned_plan_repo(self):
        from api.deps import get_assigned_plan_repo
        from infrastructure import SupabaseAssignedPlanRepository

        assert isinstance(get_assigned_plan_repo(client=MagicMock()), SupabaseAssignedPlanRepository)

    def test_workout_log_repo(self):
        from api.deps import get_workout_log_repo
        from infrastructure import SupabaseWorkoutLogRepository

        assert isinstance(get_workout_log_repo(client=MagicMock()), SupabaseWorkoutLogRepository)

    def test_goal_tracker(self):
        from api.deps import get_goal_tracker
        from infrastructure import SupabaseGoalTracker

        assert isinstance(get_goal_tracker(client=MagicMock()), SupabaseGoalTracker)

    def test_alert_sink_is_shared(self):
        from api.deps import get_alert_sink
        from infrastructure import LoggingAlertSink

        assert isinstance(get_alert_sink(), LoggingAlertSink)
        assert get_alert_sink() is get_alert_sink()

    def test_reconciler(self):
        from api.deps import get_reconciler
        from backend.session import PersistenceReconciler

        reconciler = get_reconciler(schedule_repo=MagicMock(), plan_repo=MagicMock())
        assert isinstance(reconciler, PersistenceReconciler)


# =============================================================================
# Session Registry Tests
# =============================================================================


class TestSessionRegistryProvider:
    def test_registry_requires_database(self):
        from api.deps import _build_registry, get_session_registry

        _build_registry.cache_clear()
        with patch("api.deps.get_supabase_client", return_value=None):
            with pytest.raises(HTTPException) as exc_info:
                get_session_registry()
        assert exc_info.value.status_code == 503

    def test_registry_is_process_wide(self):
        from api.deps import _build_registry, get_session_registry
        from backend.session import SessionRegistry

        _build_registry.cache_clear()
        try:
            with patch("api.deps.get_supabase_client", return_value=MagicMock()):
                registry = get_session_registry()
                assert isinstance(registry, SessionRegistry)
                assert get_session_registry() is registry
        finally:
            _build_registry.cache_clear()

    def test_close_without_registry_is_noop(self):
        from api.deps import _build_registry, close_session_registry

        _build_registry.cache_clear()
        close_session_registry()
        assert _build_registry.cache_info().currsize == 0


# =============================================================================
# Athlete Identity Tests
# =============================================================================


class TestCurrentAthlete:
    def test_header_value_is_returned(self):
        from api.deps import get_current_athlete

        assert get_current_athlete(x_athlete_id=" athlete-1 ") == "athlete-1"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_header_raises_401(self, value):
        from api.deps import get_current_athlete

        with pytest.raises(HTTPException) as exc_info:
            get_current_athlete(x_athlete_id=value)
        assert exc_info.value.status_code == 401
