"""
Domain layer for the session engine.

This package contains the workout tree models and the pure operations that
edit them. It is independent of infrastructure concerns (database, API,
timers).
"""

from domain.models import (
    Block,
    BlockMode,
    CustomOrigin,
    PlanDerivedOrigin,
    Session,
    SessionExercise,
    SessionOrigin,
    SetType,
    WorkoutSet,
)

__all__ = [
    "Block",
    "BlockMode",
    "CustomOrigin",
    "PlanDerivedOrigin",
    "Session",
    "SessionExercise",
    "SessionOrigin",
    "SetType",
    "WorkoutSet",
]
