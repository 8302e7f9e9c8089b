"""
Dependency providers for the session engine API.

Routers ask for ports (ScheduleRepository, GoalTracker, ...) and get the
Supabase adapters; tests swap any provider through
``app.dependency_overrides``.

Lifetimes:
- the Supabase client and the alert sink live for the whole process
- adapters and the reconciler are built per request (they hold no state)
- the SessionRegistry lives for the whole process, because open days keep
  their block and rest tickers running between requests
"""

from datetime import date
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException
from supabase import Client, create_client

from application.ports import (
    AlertSink,
    AssignedPlanRepository,
    GoalTracker,
    ScheduleRepository,
    WorkoutLogRepository,
)
from infrastructure import (
    LoggingAlertSink,
    SupabaseAssignedPlanRepository,
    SupabaseGoalTracker,
    SupabaseScheduleRepository,
    SupabaseWorkoutLogRepository,
)
from backend.session import PersistenceReconciler, SessionOrchestrator, SessionRegistry
from backend.session.history import HistoryLookup
from backend.session.ticker import interval_ticker_factory
from backend.settings import Settings, get_settings as _get_settings


# =============================================================================
# Configuration and database
# =============================================================================


def get_settings() -> Settings:
    return _get_settings()


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """Shared Supabase client, or None when URL or key is missing."""
    settings = _get_settings()
    if not (settings.supabase_url and settings.supabase_key):
        return None
    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Supabase client for endpoints that cannot work without the store.

    Raises:
        HTTPException: 503 when Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Session store not configured (SUPABASE_URL / key missing)",
        )
    return client


# =============================================================================
# Ports
# =============================================================================


def get_schedule_repo(
    client: Client = Depends(get_supabase_client_required),
) -> ScheduleRepository:
    return SupabaseScheduleRepository(client)


def get_assigned_plan_repo(
    client: Client = Depends(get_supabase_client_required),
) -> AssignedPlanRepository:
    return SupabaseAssignedPlanRepository(client)


def get_workout_log_repo(
    client: Client = Depends(get_supabase_client_required),
) -> WorkoutLogRepository:
    return SupabaseWorkoutLogRepository(client)


def get_goal_tracker(
    client: Client = Depends(get_supabase_client_required),
) -> GoalTracker:
    return SupabaseGoalTracker(client)


@lru_cache
def get_alert_sink() -> AlertSink:
    """Process-wide alert sink for rest-countdown alerts."""
    return LoggingAlertSink()


def get_reconciler(
    schedule_repo: ScheduleRepository = Depends(get_schedule_repo),
    plan_repo: AssignedPlanRepository = Depends(get_assigned_plan_repo),
) -> PersistenceReconciler:
    return PersistenceReconciler(schedule_repo, plan_repo)


# =============================================================================
# Session engine
# =============================================================================


@lru_cache
def _build_registry() -> SessionRegistry:
    settings = _get_settings()
    client = get_supabase_client_required()
    log_repo = SupabaseWorkoutLogRepository(client)
    goal_tracker = SupabaseGoalTracker(client)
    reconciler = PersistenceReconciler(
        SupabaseScheduleRepository(client),
        SupabaseAssignedPlanRepository(client),
    )
    history = HistoryLookup(log_repo, limit=settings.history_log_limit)
    ticker_factory = interval_ticker_factory(settings.tick_interval_seconds)

    def open_day(athlete_id: str, on_date: date) -> SessionOrchestrator:
        return SessionOrchestrator.open(
            reconciler,
            athlete_id,
            on_date,
            get_alert_sink(),
            log_repo=log_repo,
            goal_tracker=goal_tracker,
            history=history,
            ticker_factory=ticker_factory,
            default_rest_seconds=settings.default_rest_seconds,
            persist_inline=settings.persist_inline,
        )

    return SessionRegistry(open_day)


def get_session_registry() -> SessionRegistry:
    """
    Process-wide SessionRegistry.

    Raises:
        HTTPException: 503 when Supabase is not configured
    """
    return _build_registry()


def close_session_registry() -> None:
    """Close every open session day, if the registry was ever built."""
    if _build_registry.cache_info().currsize:
        _build_registry().close_all()


# =============================================================================
# Athlete identity
# =============================================================================


def get_current_athlete(
    x_athlete_id: Optional[str] = Header(None, alias="X-Athlete-Id"),
) -> str:
    """
    Athlete id forwarded by the upstream gateway.

    Authentication happens before requests reach this service.

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    if not x_athlete_id or not x_athlete_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-Athlete-Id header")
    return x_athlete_id.strip()


__all__ = [
    "get_settings",
    "get_supabase_client",
    "get_supabase_client_required",
    "get_schedule_repo",
    "get_assigned_plan_repo",
    "get_workout_log_repo",
    "get_goal_tracker",
    "get_alert_sink",
    "get_reconciler",
    "get_session_registry",
    "close_session_registry",
    "get_current_athlete",
]
