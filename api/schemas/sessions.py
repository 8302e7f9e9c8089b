"""
Pydantic models for the sessions API.

Requests carry the athlete's actions; responses flatten the engine's
snapshot into JSON. Block payloads use the camelCase ``workout_data`` shape
the clients already read.
"""

from dataclasses import asdict
from datetime import date as date_type, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from backend.session import (
    ActivationResult,
    CompleteBlockResult,
    RestTimerState,
    SessionDaySnapshot,
)
from backend.session.goal_tracking import format_duration
from backend.session.history import ExerciseHistory
from domain.models import Session, SessionExercise, WorkoutSet


# =============================================================================
# Requests
# =============================================================================


class CreateCustomSessionRequest(BaseModel):
    """Create an empty athlete-owned session"""
    date: date_type
    title: str = Field(..., min_length=1, max_length=200)


class ActivateBlockRequest(BaseModel):
    confirm: bool = False


class LogSetRequest(BaseModel):
    """Actual values logged for a set; omitted fields are left unchanged"""
    completed_reps: Optional[str] = None
    completed_weight: Optional[str] = None
    completed_rpe: Optional[str] = None
    completed_distance: Optional[str] = None
    completed_time: Optional[str] = None


class StartRestRequest(BaseModel):
    after_set_id: Optional[str] = None
    seconds: Optional[int] = Field(default=None, gt=0, le=3600)


class AddExerciseRequest(BaseModel):
    exercise: SessionExercise
    position: Optional[int] = Field(default=None, ge=0)


# =============================================================================
# Responses
# =============================================================================


class SessionResponse(BaseModel):
    id: str
    date: str
    title: str
    origin: Dict[str, Any]
    completed: bool
    duration: int
    duration_display: str
    completed_at: Optional[datetime] = None
    blocks: List[Dict[str, Any]] = []

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        return cls(
            id=session.id,
            date=session.date_key,
            title=session.title,
            origin=session.origin.model_dump(),
            completed=session.completed,
            duration=session.duration,
            duration_display=format_duration(session.duration),
            completed_at=session.completed_at,
            blocks=session.workout_data(),
        )


class RestStateResponse(BaseModel):
    active: bool
    seconds_remaining: int
    preset_seconds: int
    after_set_id: Optional[str] = None

    @classmethod
    def from_state(cls, state: RestTimerState) -> "RestStateResponse":
        return cls(
            active=state.active,
            seconds_remaining=state.seconds_remaining,
            preset_seconds=state.preset_seconds,
            after_set_id=state.after_set_id,
        )


class ExerciseHistoryResponse(BaseModel):
    exercise_id: str
    last_workout_date: Optional[str] = None
    last_sets: List[Dict[str, Any]] = []
    personal_best_weight: Optional[float] = None
    personal_best_reps: Optional[float] = None
    personal_best_date: Optional[str] = None

    @classmethod
    def from_history(cls, history: ExerciseHistory) -> "ExerciseHistoryResponse":
        best = history.personal_best
        return cls(
            exercise_id=history.exercise_id,
            last_workout_date=history.last_workout_date,
            last_sets=[asdict(s) for s in history.last_sets],
            personal_best_weight=best.weight if best else None,
            personal_best_reps=best.reps if best else None,
            personal_best_date=best.workout_date if best else None,
        )


class DaySnapshotResponse(BaseModel):
    athlete_id: str
    date: str
    sessions: List[SessionResponse]
    active_block_ids: List[str]
    block_elapsed: Dict[str, int]
    session_elapsed: Dict[str, int]
    rest: RestStateResponse
    history: Dict[str, ExerciseHistoryResponse] = {}

    @classmethod
    def from_snapshot(cls, snapshot: SessionDaySnapshot) -> "DaySnapshotResponse":
        return cls(
            athlete_id=snapshot.athlete_id,
            date=snapshot.date,
            sessions=[SessionResponse.from_session(s) for s in snapshot.sessions],
            active_block_ids=sorted(snapshot.active_block_ids),
            block_elapsed=dict(snapshot.block_elapsed),
            session_elapsed=dict(snapshot.session_elapsed),
            rest=RestStateResponse.from_state(snapshot.rest),
            history={k: ExerciseHistoryResponse.from_history(v) for k, v in snapshot.history.items()},
        )


class ActivationResponse(BaseModel):
    status: str
    block_id: str
    warning: Optional[str] = None
    active_block_ids: List[str] = []

    @classmethod
    def from_result(cls, result: ActivationResult) -> "ActivationResponse":
        warning = result.warning
        return cls(
            status=result.status.value,
            block_id=result.block_id,
            warning=warning.message if warning else None,
            active_block_ids=list(warning.active_block_ids) if warning else [],
        )


class CompleteBlockResponse(BaseModel):
    block_id: str
    elapsed_seconds: int
    session_id: str
    session_completed: bool
    next_block_id: Optional[str] = None

    @classmethod
    def from_result(cls, result: CompleteBlockResult) -> "CompleteBlockResponse":
        return cls(
            block_id=result.block_id,
            elapsed_seconds=result.elapsed_seconds,
            session_id=result.session_id,
            session_completed=result.session_completed,
            next_block_id=result.next_block_id,
        )


class SetResponse(BaseModel):
    set: Dict[str, Any]
    rest: RestStateResponse

    @classmethod
    def from_set(cls, workout_set: WorkoutSet, rest: RestTimerState) -> "SetResponse":
        return cls(
            set=workout_set.model_dump(mode="json", by_alias=True),
            rest=RestStateResponse.from_state(rest),
        )
