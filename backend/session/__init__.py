"""
Workout session execution engine.

- ticker: repeating one-second tick sources
- block_timers: elapsed time of every active block, one shared tick
- rest_timer: the single rest countdown and its alert
- orchestrator: block lifecycle, set completion, auto-progression
- reconciler: sessions <-> athlete_schedule rows and assigned plans
- persist_queue: durable writes queued after in-memory transitions
- history: last-time and personal-best annotations
- goal_tracking: workout-log rows and goal results of a completed block
- registry: one orchestrator per (athlete, date)
"""

from backend.session.orchestrator import (
    ActivationResult,
    ActivationStatus,
    CompleteBlockResult,
    MultipleActiveBlocksWarning,
    SessionDaySnapshot,
    SessionOrchestrator,
)
from backend.session.persist_queue import PersistQueue, PersistStatus
from backend.session.reconciler import PersistenceReconciler
from backend.session.registry import SessionRegistry
from backend.session.rest_timer import RestTimer, RestTimerState

__all__ = [
    "SessionOrchestrator",
    "ActivationResult",
    "ActivationStatus",
    "CompleteBlockResult",
    "MultipleActiveBlocksWarning",
    "SessionDaySnapshot",
    "PersistQueue",
    "PersistStatus",
    "PersistenceReconciler",
    "SessionRegistry",
    "RestTimer",
    "RestTimerState",
]
