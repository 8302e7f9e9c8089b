"""
Shared fixtures for the session engine test suite.

Every fixture builds fresh in-memory fakes, so tests never share state and
never touch Supabase, threads or audio.
"""

import pytest

from backend.session import PersistenceReconciler, SessionOrchestrator
from backend.session.history import HistoryLookup
from tests.fakes import (
    TEST_ATHLETE_ID,
    TEST_DATE,
    FakeAssignedPlanRepository,
    FakeGoalTracker,
    FakeScheduleRepository,
    FakeWorkoutLogRepository,
    ManualTickerFactory,
    RecordingAlertSink,
)


@pytest.fixture
def schedule_repo() -> FakeScheduleRepository:
    return FakeScheduleRepository()


@pytest.fixture
def plan_repo() -> FakeAssignedPlanRepository:
    return FakeAssignedPlanRepository()


@pytest.fixture
def log_repo() -> FakeWorkoutLogRepository:
    return FakeWorkoutLogRepository()


@pytest.fixture
def goal_tracker() -> FakeGoalTracker:
    return FakeGoalTracker()


@pytest.fixture
def alert_sink() -> RecordingAlertSink:
    return RecordingAlertSink()


@pytest.fixture
def ticker_factory() -> ManualTickerFactory:
    return ManualTickerFactory()


@pytest.fixture
def reconciler(schedule_repo, plan_repo) -> PersistenceReconciler:
    return PersistenceReconciler(schedule_repo, plan_repo)


@pytest.fixture
def open_day(reconciler, alert_sink, log_repo, goal_tracker, ticker_factory):
    """
    Open TEST_DATE for TEST_ATHLETE_ID with every fake wired in.

    Seed the repositories first, then call ``open_day()``.
    """

    def _open(on_date=TEST_DATE, **kwargs) -> SessionOrchestrator:
        options = {
            "log_repo": log_repo,
            "goal_tracker": goal_tracker,
            "history": HistoryLookup(log_repo),
            "ticker_factory": ticker_factory,
        }
        options.update(kwargs)
        return SessionOrchestrator.open(
            reconciler, TEST_ATHLETE_ID, on_date, alert_sink, **options
        )

    return _open
