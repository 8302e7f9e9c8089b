"""
Infrastructure Database Layer.

This package provides Supabase-backed implementations of the repository interfaces
defined in application.ports. These implementations can be injected into the
session engine and routers for clean separation of concerns and testability.

Usage:
    from supabase import create_client
    from infrastructure.db import (
        SupabaseScheduleRepository,
        SupabaseAssignedPlanRepository,
        SupabaseWorkoutLogRepository,
        SupabaseGoalTracker,
    )

    # Create Supabase client
    client = create_client(SUPABASE_URL, SUPABASE_KEY)

    # Instantiate repositories with injected client
    schedule_repo = SupabaseScheduleRepository(client)
    plan_repo = SupabaseAssignedPlanRepository(client)
    log_repo = SupabaseWorkoutLogRepository(client)
    goal_tracker = SupabaseGoalTracker(client)
"""

from infrastructure.db.schedule_repository import SupabaseScheduleRepository
from infrastructure.db.assigned_plan_repository import SupabaseAssignedPlanRepository
from infrastructure.db.workout_log_repository import SupabaseWorkoutLogRepository
from infrastructure.db.goal_tracker import SupabaseGoalTracker

__all__ = [
    # Athlete schedule
    "SupabaseScheduleRepository",

    # Assigned plans
    "SupabaseAssignedPlanRepository",

    # Workout history
    "SupabaseWorkoutLogRepository",

    # Goal auto-tracking
    "SupabaseGoalTracker",
]
