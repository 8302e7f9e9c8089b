"""
HTTP layer of the session engine.

- deps: dependency providers (ports, Supabase client, session registry)
- routers: health and sessions endpoints
- schemas: request and response models
"""

from api.deps import (
    close_session_registry,
    get_alert_sink,
    get_assigned_plan_repo,
    get_current_athlete,
    get_goal_tracker,
    get_reconciler,
    get_schedule_repo,
    get_session_registry,
    get_settings,
    get_supabase_client,
    get_supabase_client_required,
    get_workout_log_repo,
)

__all__ = [
    "close_session_registry",
    "get_alert_sink",
    "get_assigned_plan_repo",
    "get_current_athlete",
    "get_goal_tracker",
    "get_reconciler",
    "get_schedule_repo",
    "get_session_registry",
    "get_settings",
    "get_supabase_client",
    "get_supabase_client_required",
    "get_workout_log_repo",
]
