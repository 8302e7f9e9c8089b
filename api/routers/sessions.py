"""
Sessions router for workout session execution.

This router contains endpoints for:
- /sessions - List an athlete's sessions in a date range
- /sessions/custom - Create a custom session
- /sessions/{session_id} - Remove a session from the schedule
- /sessions/day/{day}/... - Run the sessions of one day: activate and
  complete blocks, toggle and log sets, control the rest countdown and
  make structural edits

A day must be opened (POST /sessions/day/{day}/open) before it can be
executed; its timers keep running in the process between requests.
"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_current_athlete, get_reconciler, get_session_registry
from api.schemas.sessions import (
    ActivateBlockRequest,
    ActivationResponse,
    AddExerciseRequest,
    CompleteBlockResponse,
    CreateCustomSessionRequest,
    DaySnapshotResponse,
    LogSetRequest,
    RestStateResponse,
    SessionResponse,
    SetResponse,
    StartRestRequest,
)
from application.exceptions import (
    BlockNotActive,
    NodeNotFound,
    PersistenceFailure,
    StructuralEditNotAllowed,
)
from backend.session import PersistenceReconciler, SessionOrchestrator, SessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/sessions",
    tags=["Sessions"],
)


# =============================================================================
# Helpers
# =============================================================================


@contextmanager
def _engine_errors():
    """Translate engine exceptions into HTTP errors."""
    try:
        yield
    except (StructuralEditNotAllowed, BlockNotActive) as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except NodeNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except PersistenceFailure as e:
        logger.error(f"Store error: {e}")
        raise HTTPException(status_code=502, detail="Session store unavailable") from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def _open_day(registry: SessionRegistry, athlete_id: str, day: date) -> SessionOrchestrator:
    orchestrator = registry.get(athlete_id, day)
    if orchestrator is None:
        raise HTTPException(status_code=404, detail=f"Session day {day.isoformat()} is not open")
    return orchestrator


# =============================================================================
# Schedule
# =============================================================================


@router.get("", response_model=Dict[str, List[SessionResponse]])
def list_sessions(
    date_from: date = Query(...),
    date_to: date = Query(...),
    athlete_id: str = Depends(get_current_athlete),
    reconciler: PersistenceReconciler = Depends(get_reconciler),
):
    """
    List sessions between two dates (inclusive), grouped by ISO date.
    """
    if date_to < date_from:
        raise HTTPException(status_code=400, detail="date_to must not be before date_from")
    with _engine_errors():
        by_date = reconciler.load_sessions(athlete_id, date_from, date_to)
    return {
        day: [SessionResponse.from_session(s) for s in sessions]
        for day, sessions in by_date.items()
    }


@router.post("/custom", response_model=SessionResponse, status_code=201)
def create_custom_session(
    request: CreateCustomSessionRequest,
    athlete_id: str = Depends(get_current_athlete),
    reconciler: PersistenceReconciler = Depends(get_reconciler),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """
    Create an empty custom session on a date.
    """
    with _engine_errors():
        session = reconciler.create_custom_session(athlete_id, request.date, request.title)

    orchestrator = registry.get(athlete_id, request.date)
    if orchestrator is not None:
        orchestrator.add_session(session)
    return SessionResponse.from_session(session)


@router.delete("/{session_id}")
def remove_session(
    session_id: str,
    day: date = Query(..., alias="date"),
    athlete_id: str = Depends(get_current_athlete),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """
    Remove a session from the schedule.

    Custom sessions are deleted; plan sessions go back to the plan's
    original prescription.
    """
    with _engine_errors():
        orchestrator = registry.open(athlete_id, day)
        orchestrator.remove_session(session_id)
    return {"success": True, "session_id": session_id}


# =============================================================================
# Day lifecycle
# =============================================================================


@router.post("/day/{day}/open", response_model=DaySnapshotResponse)
def open_day(
    day: date,
    athlete_id: str = Depends(get_current_athlete),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Load the sessions of a day into the engine (idempotent)."""
    with _engine_errors():
        orchestrator = registry.open(athlete_id, day)
    return DaySnapshotResponse.from_snapshot(orchestrator.snapshot())


@router.get("/day/{day}", response_model=DaySnapshotResponse)
def get_day(
    day: date,
    athlete_id: str = Depends(get_current_athlete),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Current state of an open day: sessions, timers, rest and history."""
    orchestrator = _open_day(registry, athlete_id, day)
    return DaySnapshotResponse.from_snapshot(orchestrator.snapshot())


@router.post("/day/{day}/close")
def close_day(
    day: date,
    athlete_id: str = Depends(get_current_athlete),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Stop all timers of a day and flush pending writes."""
    if not registry.close(athlete_id, day):
        raise HTTPException(status_code=404, detail=f"Session day {day.isoformat()} is not open")
    return {"success": True}


# =============================================================================
# Blocks
# =============================================================================


@router.post("/day/{day}/blocks/{block_id}/activate", response_model=ActivationResponse)
def activate_block(
    day: date,
    block_id: str,
    request: Optional[ActivateBlockRequest] = None,
    athlete_id: str = Depends(get_current_athlete),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """
    Start a block.

    When another block is running the response has status
    ``confirmation_required``; repeat with ``{"confirm": true}`` to run both.
    """
    orchestrator = _open_day(registry, athlete_id, day)
    confirm = request.confirm if request else False
    with _engine_errors():
        result = orchestrator.activate(block_id, confirm=confirm)
    return ActivationResponse.from_result(result)


@router.post("/day/{day}/blocks/{block_id}/complete", response_model=CompleteBlockResponse)
def complete_block(
    day: date,
    block_id: str,
    athlete_id: str = Depends(get_current_athlete),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Finish an active block; the next block starts automatically."""
    orchestrator = _open_day(registry, athlete_id, day)
    with _engine_errors():
        result = orchestrator.complete_block(block_id)
    return CompleteBlockResponse.from_result(result)


@router.post("/day/{day}/blocks/{block_id}/exercises", response_model=SessionResponse)
def add_exercise(
    day: date,
    block_id: str,
    request: AddExerciseRequest,
    athlete_id: str = Depends(get_current_athlete),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Add an exercise to an inactive block of a custom session."""
    orchestrator = _open_day(registry, athlete_id, day)
    with _engine_errors():
        session = orchestrator.add_exercise(block_id, request.exercise, request.position)
    return SessionResponse.from_session(session)


# =============================================================================
# Sets
# =============================================================================


@router.post(
    "/day/{day}/blocks/{block_id}/exercises/{exercise_id}/sets/{set_id}/toggle",
    response_model=SetResponse,
)
def toggle_set(
    day: date,
    block_id: str,
    exercise_id: str,
    set_id: str,
    athlete_id: str = Depends(get_current_athlete),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Toggle set completion; completing a set starts the rest countdown."""
    orchestrator = _open_day(registry, athlete_id, day)
    with _engine_errors():
        workout_set = orchestrator.complete_set(block_id, exercise_id, set_id)
    return SetResponse.from_set(workout_set, orchestrator.rest_state)


@router.patch(
    "/day/{day}/blocks/{block_id}/exercises/{exercise_id}/sets/{set_id}",
    response_model=SetResponse,
)
def log_set(
    day: date,
    block_id: str,
    exercise_id: str,
    set_id: str,
    request: LogSetRequest,
    athlete_id: str = Depends(get_current_athlete),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Record actual values of a set."""
    orchestrator = _open_day(registry, athlete_id, day)
    with _engine_errors():
        workout_set = orchestrator.log_set(
            block_id, exercise_id, set_id, **request.model_dump(exclude_unset=True)
        )
    return SetResponse.from_set(workout_set, orchestrator.rest_state)


# =============================================================================
# Rest countdown
# =============================================================================


@router.post("/day/{day}/rest/start", response_model=RestStateResponse)
def start_rest(
    day: date,
    request: Optional[StartRestRequest] = None,
    athlete_id: str = Depends(get_current_athlete),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Start (or restart) the rest countdown."""
    orchestrator = _open_day(registry, athlete_id, day)
    request = request or StartRestRequest()
    state = orchestrator.start_rest(request.after_set_id, request.seconds)
    return RestStateResponse.from_state(state)


@router.post("/day/{day}/rest/stop", response_model=RestStateResponse)
def stop_rest(
    day: date,
    athlete_id: str = Depends(get_current_athlete),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Cancel the rest countdown without alerting."""
    orchestrator = _open_day(registry, athlete_id, day)
    orchestrator.stop_rest()
    return RestStateResponse.from_state(orchestrator.rest_state)
