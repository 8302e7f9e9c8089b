"""Verify all modules can be imported without errors."""
import pytest

# All tests in this module are pure import checks - mark as unit tests
pytestmark = pytest.mark.unit


def test_domain_imports():
    """Import domain modules."""
    import domain.exceptions
    import domain.models
    import domain.services.workout_tree
    import domain.converters.db_converters


def test_application_imports():
    """Import ports and exceptions."""
    import application.exceptions
    import application.ports.alert_sink
    import application.ports.assigned_plan_repository
    import application.ports.goal_tracker
    import application.ports.schedule_repository
    import application.ports.workout_log_repository


def test_session_engine_imports():
    """Import session engine modules."""
    import backend.session.block_timers
    import backend.session.goal_tracking
    import backend.session.history
    import backend.session.orchestrator
    import backend.session.persist_queue
    import backend.session.progression
    import backend.session.reconciler
    import backend.session.registry
    import backend.session.rest_timer
    import backend.session.ticker


def test_infrastructure_imports():
    """Import adapter modules."""
    import infrastructure.alerts.logging_sink
    import infrastructure.db.assigned_plan_repository
    import infrastructure.db.goal_tracker
    import infrastructure.db.schedule_repository
    import infrastructure.db.workout_log_repository


def test_api_imports():
    """Import the HTTP layer."""
    import api.deps
    import api.routers.health
    import api.routers.sessions
    import api.schemas.sessions
    import backend.main
    import backend.settings
