"""
Infrastructure Layer for the session engine.

This package contains concrete implementations of the application ports:
- db/: Supabase database implementations
- alerts/: Output devices for the rest-countdown alert
"""

# Re-export adapters for convenient access
from infrastructure.db import (
    SupabaseScheduleRepository,
    SupabaseAssignedPlanRepository,
    SupabaseWorkoutLogRepository,
    SupabaseGoalTracker,
)
from infrastructure.alerts import LoggingAlertSink

__all__ = [
    "SupabaseScheduleRepository",
    "SupabaseAssignedPlanRepository",
    "SupabaseWorkoutLogRepository",
    "SupabaseGoalTracker",
    "LoggingAlertSink",
]
