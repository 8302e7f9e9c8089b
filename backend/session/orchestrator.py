"""
Session orchestrator.

Owns the sessions of one athlete on one visible date and drives everything
that happens while they are executed:

- block activation (with the multiple-active-blocks guard)
- set completion and logging, which feed the rest countdown
- block completion: workout logs, goal tracking, session completion,
  persistence and auto-progression to the next block
- structural edits on custom sessions, refused while the block is running

Every transition is applied in memory first. Durable writes are submitted to
a PersistQueue and flushed once the transition is done; a failing write is
logged and never rolls the in-memory state back.

Lock order: orchestrator lock, then the block-timer lock. Ticks only take
the block-timer lock, so a tick never lands in the middle of a transition.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from threading import RLock
from typing import Dict, FrozenSet, List, Optional, Tuple

from application.exceptions import (
    BlockNotActive,
    HistoryLookupFailure,
    NodeNotFound,
    StructuralEditNotAllowed,
)
from application.ports import AlertSink, GoalTracker, WorkoutLogRepository
from backend.session.block_timers import BlockTimerScheduler
from backend.session.goal_tracking import build_log_entries, strength_results
from backend.session.history import ExerciseHistory, HistoryLookup
from backend.session.persist_queue import PersistQueue
from backend.session.progression import next_block_to_activate
from backend.session.reconciler import PersistenceReconciler
from backend.session.rest_timer import DEFAULT_REST_SECONDS, RestTimer, RestTimerState
from backend.session.ticker import TickerFactory
from domain.models import Block, Session, SessionExercise, WorkoutSet
from domain.services import workout_tree as tree

logger = logging.getLogger(__name__)


# =============================================================================
# Results
# =============================================================================


class ActivationStatus(str, Enum):
    ACTIVATED = "activated"
    ALREADY_ACTIVE = "already_active"
    CONFIRMATION_REQUIRED = "confirmation_required"


@dataclass(frozen=True)
class MultipleActiveBlocksWarning:
    """Returned instead of activating when another block is already running."""
    requested_block_id: str
    active_block_ids: Tuple[str, ...]

    @property
    def message(self) -> str:
        return (
            f"{len(self.active_block_ids)} block(s) already active; "
            f"confirm to run '{self.requested_block_id}' at the same time"
        )


@dataclass(frozen=True)
class ActivationResult:
    status: ActivationStatus
    block_id: str
    warning: Optional[MultipleActiveBlocksWarning] = None

    @property
    def activated(self) -> bool:
        return self.status == ActivationStatus.ACTIVATED


@dataclass(frozen=True)
class CompleteBlockResult:
    block_id: str
    elapsed_seconds: int
    session_id: str
    session_completed: bool
    next_block_id: Optional[str] = None
    persist_job_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SessionDaySnapshot:
    """Immutable view of the day for rendering."""
    athlete_id: str
    date: str
    sessions: Tuple[Session, ...]
    active_block_ids: FrozenSet[str]
    block_elapsed: Dict[str, int]
    session_elapsed: Dict[str, int]
    rest: RestTimerState
    history: Dict[str, ExerciseHistory] = field(default_factory=dict)


# =============================================================================
# Orchestrator
# =============================================================================


class SessionOrchestrator:
    """
    Single-writer engine for one athlete on one date.

    Usage:
        orchestrator = SessionOrchestrator.open(reconciler, athlete_id, day, ...)
        orchestrator.activate("block-a")
        orchestrator.complete_set("block-a", "ex-1", "set-1")
        orchestrator.complete_block("block-a")
    """

    def __init__(
        self,
        athlete_id: str,
        on_date: date,
        sessions: List[Session],
        reconciler: PersistenceReconciler,
        alert_sink: AlertSink,
        log_repo: Optional[WorkoutLogRepository] = None,
        goal_tracker: Optional[GoalTracker] = None,
        history: Optional[HistoryLookup] = None,
        persist_queue: Optional[PersistQueue] = None,
        ticker_factory: Optional[TickerFactory] = None,
        default_rest_seconds: int = DEFAULT_REST_SECONDS,
        persist_inline: bool = True,
    ):
        self.athlete_id = athlete_id
        self.date = on_date
        self._sessions: List[Session] = list(sessions)
        self._reconciler = reconciler
        self._log_repo = log_repo
        self._goal_tracker = goal_tracker
        self._history_lookup = history
        self._queue = persist_queue or PersistQueue()
        self._persist_inline = persist_inline
        self._lock = RLock()
        self._timers = BlockTimerScheduler(ticker_factory)
        self._rest = RestTimer(
            alert_sink,
            ticker_factory=ticker_factory,
            default_seconds=default_rest_seconds,
        )
        self._history: Dict[str, ExerciseHistory] = {}
        # stored active seconds of each session when the day was loaded
        self._loaded_duration: Dict[str, int] = {s.id: s.duration for s in self._sessions}

    @classmethod
    def open(
        cls,
        reconciler: PersistenceReconciler,
        athlete_id: str,
        on_date: date,
        alert_sink: AlertSink,
        **kwargs,
    ) -> "SessionOrchestrator":
        """Load the sessions of a day and build an orchestrator over them."""
        sessions = reconciler.load_day(athlete_id, on_date)
        logger.info(f"Opened {len(sessions)} session(s) for athlete {athlete_id} on {on_date}")
        return cls(athlete_id, on_date, sessions, reconciler, alert_sink, **kwargs)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def sessions(self) -> Tuple[Session, ...]:
        with self._lock:
            return tuple(self._sessions)

    @property
    def active_block_ids(self) -> FrozenSet[str]:
        return frozenset(self._timers.active_block_ids())

    @property
    def rest_state(self) -> RestTimerState:
        return self._rest.state

    @property
    def persist_queue(self) -> PersistQueue:
        return self._queue

    def get_session(self, session_id: str) -> Session:
        with self._lock:
            return self._sessions[self._session_index(session_id)]

    def elapsed(self, block_id: str) -> int:
        return self._timers.elapsed(block_id)

    def snapshot(self) -> SessionDaySnapshot:
        with self._lock:
            with self._timers.lock:
                sessions = tuple(self._sessions)
                block_elapsed = self._timers.snapshot()
                session_elapsed = {s.id: self._timers.total_elapsed(s.id) for s in sessions}
                active = frozenset(block_elapsed)
            return SessionDaySnapshot(
                athlete_id=self.athlete_id,
                date=self.date.isoformat(),
                sessions=sessions,
                active_block_ids=active,
                block_elapsed=block_elapsed,
                session_elapsed=session_elapsed,
                rest=self._rest.state,
                history=dict(self._history),
            )

    # -------------------------------------------------------------------------
    # Block lifecycle
    # -------------------------------------------------------------------------

    def activate(self, block_id: str, confirm: bool = False) -> ActivationResult:
        """
        Start a block.

        If another block is already running and ``confirm`` is false, nothing
        changes and a CONFIRMATION_REQUIRED result carrying a
        MultipleActiveBlocksWarning is returned.
        """
        with self._lock:
            idx = self._locate_block(block_id)
            if self._timers.is_active(block_id):
                return ActivationResult(ActivationStatus.ALREADY_ACTIVE, block_id)

            others = self._timers.active_block_ids()
            if others and not confirm:
                warning = MultipleActiveBlocksWarning(
                    requested_block_id=block_id,
                    active_block_ids=tuple(sorted(others)),
                )
                logger.info(f"Activation of {block_id} needs confirmation: {warning.message}")
                return ActivationResult(ActivationStatus.CONFIRMATION_REQUIRED, block_id, warning)

            self._start_block(idx, block_id)
        self._after_transition()
        return ActivationResult(ActivationStatus.ACTIVATED, block_id)

    def complete_block(self, block_id: str) -> CompleteBlockResult:
        """
        Finish an active block.

        Stops the rest countdown, queues one workout-log row per exercise and
        the goal updates, marks the block completed, recomputes session
        completion, queues the schedule write, stops the block's timer and
        activates the next block when it is not completed yet.

        Raises:
            BlockNotActive: if the block is not running
        """
        job_ids: List[str] = []
        with self._lock:
            idx = self._locate_block(block_id)
            with self._timers.lock:
                if not self._timers.is_active(block_id):
                    raise BlockNotActive(block_id)

                self._rest.stop()
                session = self._sessions[idx]
                block = tree.find_block(session, block_id)
                elapsed = self._timers.deactivate(block_id)

                job_ids.extend(self._submit_block_logs(session, block, elapsed))
                job_ids.extend(self._submit_strength_results(block))

                session = tree.mark_block_completed(session, block_id)
                session = self._with_completion_timing(session)
                self._sessions[idx] = session

            job_ids.append(self._submit_persist(session))
            if session.completed:
                job_ids.extend(self._submit_consistency_event())
                logger.info(f"Session {session.id} completed in {session.duration}s")

            next_block = next_block_to_activate(session, block_id)
            next_block_id = None
            if next_block is not None and not self._timers.is_active(next_block.id):
                self._start_block(idx, next_block.id)
                next_block_id = next_block.id

        logger.info(f"Block {block_id} completed after {elapsed}s")
        self._after_transition()
        return CompleteBlockResult(
            block_id=block_id,
            elapsed_seconds=elapsed,
            session_id=session.id,
            session_completed=session.completed,
            next_block_id=next_block_id,
            persist_job_ids=tuple(job_ids),
        )

    def _start_block(self, idx: int, block_id: str) -> None:
        session = self._sessions[idx]
        block = tree.find_block(session, block_id)
        if block.completed:
            session = tree.reset_block_completion(session, block_id)
            session = self._with_completion_timing(session)
            self._sessions[idx] = session
            self._submit_persist(session)
            logger.info(f"Re-activating completed block {block_id}")

        self._timers.activate(block_id, session.id)
        logger.info(f"Block {block_id} activated")
        self._annotate(block.exercises)

    def _with_completion_timing(self, session: Session) -> Session:
        if not session.completed:
            return session.with_timing(session.duration, None)
        duration = self._loaded_duration.get(session.id, 0)
        duration += self._timers.total_elapsed(session.id)
        completed_at = session.completed_at or datetime.now(timezone.utc)
        return session.with_timing(duration, completed_at)

    def _annotate(self, exercises: List[SessionExercise]) -> None:
        if self._history_lookup is None:
            return
        keys = [ex.catalog_key for ex in exercises]
        try:
            self._history.update(self._history_lookup.lookup(self.athlete_id, keys))
        except HistoryLookupFailure as e:
            logger.warning(f"History annotations omitted: {e}")

    # -------------------------------------------------------------------------
    # Sets
    # -------------------------------------------------------------------------

    def complete_set(self, block_id: str, exercise_id: str, set_id: str) -> WorkoutSet:
        """
        Toggle a set's completion.

        Completing a set (false -> true) starts the rest countdown with the
        set's prescribed rest, else the last preset. Un-completing never does.
        """
        with self._lock:
            idx = self._locate_block(block_id)
            session = self._sessions[idx]
            current = tree.find_set(session, block_id, exercise_id, set_id)
            now_completed = not current.is_completed
            session = tree.set_completion(session, block_id, exercise_id, set_id, now_completed)
            self._sessions[idx] = session
            if now_completed:
                self._rest.start(set_id, current.prescribed_rest_seconds)
            return tree.find_set(session, block_id, exercise_id, set_id)

    def log_set(self, block_id: str, exercise_id: str, set_id: str, **actuals) -> WorkoutSet:
        """Record actual values (completed_reps, completed_weight, ...) of a set."""
        with self._lock:
            idx = self._locate_block(block_id)
            session = tree.update_set_actual(
                self._sessions[idx], block_id, exercise_id, set_id, **actuals
            )
            self._sessions[idx] = session
            return tree.find_set(session, block_id, exercise_id, set_id)

    # -------------------------------------------------------------------------
    # Rest countdown
    # -------------------------------------------------------------------------

    def start_rest(self, after_set_id: Optional[str] = None, seconds: Optional[int] = None) -> RestTimerState:
        return self._rest.start(after_set_id, seconds)

    def stop_rest(self) -> None:
        self._rest.stop()

    # -------------------------------------------------------------------------
    # Structural edits (custom sessions, inactive blocks only)
    # -------------------------------------------------------------------------

    def add_block(self, session_id: str, block: Block, position: Optional[int] = None) -> Session:
        with self._lock:
            idx = self._session_index(session_id)
            session = tree.add_block(self._sessions[idx], block, position)
            self._commit_edit(idx, session)
        self._after_transition()
        return session

    def remove_block(self, block_id: str) -> Session:
        return self._edit(block_id, lambda s: tree.remove_block(s, block_id))

    def update_block(self, block_id: str, **fields) -> Session:
        return self._edit(block_id, lambda s: tree.update_block(s, block_id, **fields))

    def add_exercise(
        self, block_id: str, exercise: SessionExercise, position: Optional[int] = None
    ) -> Session:
        return self._edit(block_id, lambda s: tree.add_exercise(s, block_id, exercise, position))

    def add_set(self, block_id: str, exercise_id: str, workout_set: WorkoutSet) -> Session:
        return self._edit(block_id, lambda s: tree.add_set(s, block_id, exercise_id, workout_set))

    def remove_set(self, block_id: str, exercise_id: str, set_id: str) -> Session:
        return self._edit(block_id, lambda s: tree.remove_set(s, block_id, exercise_id, set_id))

    def _edit(self, block_id: str, change) -> Session:
        with self._lock:
            idx = self._locate_block(block_id)
            if self._timers.is_active(block_id):
                raise StructuralEditNotAllowed(
                    f"Block '{block_id}' is active; finish it before editing",
                    session_id=self._sessions[idx].id,
                    block_id=block_id,
                )
            session = change(self._sessions[idx])
            self._commit_edit(idx, session)
        self._after_transition()
        return session

    def _commit_edit(self, idx: int, session: Session) -> None:
        self._sessions[idx] = session
        self._submit_persist(session)

    # -------------------------------------------------------------------------
    # Sessions of the day
    # -------------------------------------------------------------------------

    def add_session(self, session: Session) -> None:
        """Track a session created after the day was opened."""
        with self._lock:
            if any(s.id == session.id for s in self._sessions):
                return
            self._sessions.append(session)
            self._loaded_duration[session.id] = session.duration

    def remove_session(self, session_id: str) -> bool:
        """
        Remove a session and queue its removal from the store.

        Custom sessions leave the day. A plan-derived session stays on the
        day as its untouched plan prescription; it only leaves when its plan
        no longer schedules it. Running block timers of the session are
        stopped first.

        Raises:
            NodeNotFound: if the session is not on this day
            PersistenceFailure: if the plan prescription cannot be read
        """
        with self._lock:
            idx = self._session_index(session_id)
            session = self._sessions[idx]
            pristine = None
            if session.is_plan_derived:
                pristine = self._reconciler.plan_template(session, self.athlete_id)
                if pristine is None:
                    logger.warning(f"Plan session {session.id} is no longer scheduled; dropping it")

            with self._timers.lock:
                for block_id in session.block_ids:
                    self._timers.deactivate(block_id)
                self._timers.clear_session(session.id)
            self._loaded_duration.pop(session.id, None)
            if pristine is None:
                self._sessions.pop(idx)
            else:
                self._sessions[idx] = pristine
                self._loaded_duration[pristine.id] = pristine.duration
                logger.info(f"Plan session {session.id} reset to its prescription")
            self._queue.submit(
                "schedule-remove",
                lambda: self._reconciler.remove_session(session, self.athlete_id),
            )
        self._after_transition()
        return True

    def flush_persistence(self) -> int:
        """Run queued writes now. Returns the number that failed."""
        return self._queue.flush()

    def close(self) -> None:
        """Stop every timer and flush what is still queued."""
        with self._lock:
            stopped = self._timers.stop_all()
            self._rest.stop()
        if stopped:
            logger.info(f"Closed orchestrator with running blocks: {', '.join(stopped)}")
        self._queue.flush()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _session_index(self, session_id: str) -> int:
        for idx, session in enumerate(self._sessions):
            if session.id == session_id:
                return idx
        raise NodeNotFound("session", session_id)

    def _locate_block(self, block_id: str) -> int:
        for idx, session in enumerate(self._sessions):
            if block_id in session.block_ids:
                return idx
        raise NodeNotFound("block", block_id)

    def _submit_persist(self, session: Session) -> str:
        return self._queue.submit(
            "schedule",
            lambda: self._reconciler.persist(session, self.athlete_id),
        )

    def _submit_block_logs(self, session: Session, block: Block, elapsed: int) -> List[str]:
        if self._log_repo is None or not block.exercises:
            return []
        entries = build_log_entries(session, block, self.athlete_id, elapsed)
        return [self._queue.submit("workout-log", lambda: self._log_repo.insert_logs(entries))]

    def _submit_strength_results(self, block: Block) -> List[str]:
        if self._goal_tracker is None:
            return []
        results = strength_results(block)
        if not results:
            return []
        return [
            self._queue.submit(
                "goal-strength",
                lambda: self._goal_tracker.record_strength_result(self.athlete_id, results),
            )
        ]

    def _submit_consistency_event(self) -> List[str]:
        if self._goal_tracker is None:
            return []
        return [
            self._queue.submit(
                "goal-consistency",
                lambda: self._goal_tracker.record_consistency_event(self.athlete_id),
            )
        ]

    def _after_transition(self) -> None:
        if self._persist_inline:
            self._queue.flush()

