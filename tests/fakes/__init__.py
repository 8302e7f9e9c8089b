"""
Fake Repository Implementations for Testing.

This package provides in-memory fake implementations of the session engine's
ports for fast, isolated testing. No database, threads or sound required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- ManualTickerFactory drives block and rest timers tick by tick
- Factory functions for common test scenarios

Usage:
    from tests.fakes import FakeScheduleRepository, create_custom_session

    repo = FakeScheduleRepository()
    session = create_custom_session(repo, athlete_id="athlete1", blocks=2)
"""
from datetime import date
from typing import Any, Dict, List, Optional

from domain.models import Block, BlockMode, CustomOrigin, Session, SessionExercise, WorkoutSet

from tests.fakes.schedule_repository import FakeScheduleRepository
from tests.fakes.assigned_plan_repository import FakeAssignedPlanRepository
from tests.fakes.workout_log_repository import FakeWorkoutLogRepository
from tests.fakes.goal_tracker import FakeGoalTracker
from tests.fakes.alert_sink import RecordingAlertSink
from tests.fakes.ticker import ManualTicker, ManualTickerFactory


TEST_ATHLETE_ID = "athlete-1"
TEST_DATE = date(2024, 5, 6)


# =============================================================================
# Factory Functions
# =============================================================================


def make_block(
    block_id: str,
    *,
    exercises: int = 1,
    sets: int = 2,
    weight: str = "100",
    reps: str = "5",
    rest: Optional[str] = None,
    mode: BlockMode = BlockMode.SEQUENTIAL,
    completed: bool = False,
) -> Block:
    """
    Build a block with ``exercises`` exercises of ``sets`` sets each.

    Exercise ids are "{block_id}-ex{n}", set ids "{block_id}-ex{n}-s{m}" and
    catalog ids "catalog-{block_id}-{n}".
    """
    entries = []
    for n in range(1, exercises + 1):
        ex_id = f"{block_id}-ex{n}"
        entries.append(
            SessionExercise(
                id=ex_id,
                exercise_id=f"catalog-{block_id}-{n}",
                name=f"Exercise {block_id}{n}",
                sets=[
                    WorkoutSet(id=f"{ex_id}-s{m}", reps=reps, weight=weight, rest=rest)
                    for m in range(1, sets + 1)
                ],
            )
        )
    return Block(id=block_id, name=block_id.upper(), mode=mode, exercises=entries, completed=completed)


def make_custom_session(
    record_id: str = "rec-1",
    *,
    on_date: date = TEST_DATE,
    block_ids: Optional[List[str]] = None,
    title: str = "Custom Workout",
    **block_kwargs,
) -> Session:
    """Build a custom session with one block per id in ``block_ids``."""
    blocks = [make_block(b, **block_kwargs) for b in (block_ids or ["b1"])]
    return Session(
        id=record_id,
        date=on_date,
        title=title,
        origin=CustomOrigin(record_id=record_id),
    ).with_blocks(blocks)


def create_custom_session(
    repo: FakeScheduleRepository,
    *,
    athlete_id: str = TEST_ATHLETE_ID,
    on_date: date = TEST_DATE,
    record_id: str = "rec-1",
    block_ids: Optional[List[str]] = None,
    **block_kwargs,
) -> Session:
    """Seed a custom schedule row into ``repo`` and return its Session."""
    session = make_custom_session(record_id, on_date=on_date, block_ids=block_ids, **block_kwargs)
    repo.seed([{
        "id": record_id,
        "athlete_id": athlete_id,
        "date": on_date.isoformat(),
        "plan_id": None,
        "plan_name": "Custom",
        "session_title": session.title,
        "workout_data": session.workout_data(),
        "completed": False,
    }])
    return session


def make_plan_row(
    plan_id: str = "plan-1",
    *,
    athlete_id: str = TEST_ATHLETE_ID,
    plan_name: str = "Strength Block",
    schedule: Optional[Dict[str, str]] = None,
    sessions: Optional[Dict[str, List[Block]]] = None,
) -> Dict[str, Any]:
    """
    Build an ``assigned_plans`` row.

    Args:
        schedule: ISO date -> template id (default: TEST_DATE -> "s1")
        sessions: template id -> blocks (default: "s1" with blocks b1, b2)
    """
    schedule = schedule if schedule is not None else {TEST_DATE.isoformat(): "s1"}
    sessions = sessions if sessions is not None else {"s1": [make_block("b1"), make_block("b2")]}
    return {
        "id": plan_id,
        "athlete_id": athlete_id,
        "plan_name": plan_name,
        "start_date": min(schedule) if schedule else None,
        "schedule": schedule,
        "structure": {
            "weeks": [{
                "sessions": [
                    {
                        "id": template_id,
                        "title": f"Session {template_id}",
                        "order": order,
                        "workoutData": [b.model_dump(mode="json", by_alias=True) for b in blocks],
                    }
                    for order, (template_id, blocks) in enumerate(sessions.items())
                ],
            }],
        },
    }


__all__ = [
    # Fakes
    "FakeScheduleRepository",
    "FakeAssignedPlanRepository",
    "FakeWorkoutLogRepository",
    "FakeGoalTracker",
    "RecordingAlertSink",
    "ManualTicker",
    "ManualTickerFactory",
    # Constants
    "TEST_ATHLETE_ID",
    "TEST_DATE",
    # Factories
    "make_block",
    "make_custom_session",
    "create_custom_session",
    "make_plan_row",
]
