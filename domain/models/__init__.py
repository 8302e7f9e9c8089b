"""
Domain models for the session engine.

These models describe the workout tree a session is executed against:
- Session: the aggregate root, one scheduled unit of training on a date
- Block: a group of exercises performed under one mode
- SessionExercise: one catalog exercise with its ordered sets
- WorkoutSet: target (coach) and actual (athlete) values of one set
- SessionOrigin: where a session came from, which decides how it is stored

Usage:
    >>> from domain.models import Session, Block, SessionExercise, WorkoutSet
    >>> from domain.models import CustomOrigin

    >>> session = Session(
    ...     id="rec-1",
    ...     date="2024-05-06",
    ...     title="Upper Body",
    ...     origin=CustomOrigin(record_id="rec-1"),
    ...     blocks=[
    ...         Block(
    ...             id="b1",
    ...             name="A",
    ...             exercises=[
    ...                 SessionExercise(
    ...                     id="ex1",
    ...                     exercise_id="bench-press",
    ...                     name="Bench Press",
    ...                     sets=[WorkoutSet(id="s1", reps="5", weight="80")],
    ...                 )
    ...             ],
    ...         )
    ...     ],
    ... )

    >>> # Serialize blocks the way the workout_data column stores them
    >>> data = session.workout_data()
"""

from domain.models.workout_set import (
    ACTUAL_FIELDS,
    TARGET_FIELDS,
    SetType,
    WorkoutSet,
    parse_number,
    parse_rest_seconds,
)
from domain.models.exercise import Metric, SessionExercise
from domain.models.block import Block, BlockMode
from domain.models.session import (
    CustomOrigin,
    PlanDerivedOrigin,
    Session,
    SessionOrigin,
    all_blocks_completed,
)

__all__ = [
    # Main entities
    "Session",
    "Block",
    "SessionExercise",
    "WorkoutSet",
    # Origins
    "SessionOrigin",
    "CustomOrigin",
    "PlanDerivedOrigin",
    # Enums / literals
    "BlockMode",
    "SetType",
    "Metric",
    # Helpers
    "ACTUAL_FIELDS",
    "TARGET_FIELDS",
    "all_blocks_completed",
    "parse_number",
    "parse_rest_seconds",
]
