"""
Repository Interfaces (Ports) for the session engine.

This package defines abstract interfaces that decouple the engine from
infrastructure (database, device outputs). Implementations are provided in
the infrastructure layer; in-memory fakes for tests live in tests/fakes.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the engine needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import ScheduleRepository, WorkoutLogRepository

    class PersistenceReconciler:
        def __init__(self, schedule_repo: ScheduleRepository):
            self.schedule_repo = schedule_repo
"""

# Athlete schedule
from application.ports.schedule_repository import (
    SCHEDULE_MUTABLE_FIELDS,
    ScheduleRecord,
    ScheduleRepository,
)

# Assigned plans
from application.ports.assigned_plan_repository import (
    AssignedPlan,
    AssignedPlanRepository,
    PlanSessionTemplate,
)

# Workout history
from application.ports.workout_log_repository import (
    LogEntry,
    LoggedSet,
    WorkoutLogRepository,
)

# Goal auto-tracking
from application.ports.goal_tracker import GoalTracker, StrengthResult

# Alerts
from application.ports.alert_sink import AlertSink, ChimeTone

__all__ = [
    # Schedule
    "ScheduleRepository",
    "ScheduleRecord",
    "SCHEDULE_MUTABLE_FIELDS",
    # Assigned plans
    "AssignedPlanRepository",
    "AssignedPlan",
    "PlanSessionTemplate",
    # History
    "WorkoutLogRepository",
    "LogEntry",
    "LoggedSet",
    # Goals
    "GoalTracker",
    "StrengthResult",
    # Alerts
    "AlertSink",
    "ChimeTone",
]
