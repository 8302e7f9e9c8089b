"""
Side effects of completing a block: workout log rows and goal results.

Pure helpers; the orchestrator decides when they run and submits the
resulting writes to the persist queue.
"""

from typing import List, Optional

from application.ports import LogEntry, LoggedSet, StrengthResult
from domain.models import Block, Session, WorkoutSet, parse_number


def strength_results(block: Block) -> List[StrengthResult]:
    """
    Heaviest weight per catalog exercise of a block.

    Uses actual weights, falling back to targets. Exercises without any
    positive weight are skipped.
    """
    best = {}
    for exercise in block.exercises:
        weight = exercise.max_weight()
        if weight is None or weight <= 0:
            continue
        key = exercise.catalog_key
        if weight > best.get(key, 0):
            best[key] = weight
    return [StrengthResult(exercise_id=k, max_weight=v) for k, v in best.items()]


def _logged_set(number: int, workout_set: WorkoutSet) -> LoggedSet:
    return LoggedSet(
        set_number=number,
        type=workout_set.type.value,
        reps=workout_set.resolved("completed_reps"),
        weight=workout_set.resolved("completed_weight"),
        rpe=workout_set.resolved("completed_rpe"),
        distance=workout_set.resolved("completed_distance"),
        time=workout_set.resolved("completed_time"),
        completed=workout_set.is_completed,
    )


def total_volume(sets: List[LoggedSet]) -> float:
    """Sum of weight x reps over sets where both are numeric."""
    volume = 0.0
    for logged in sets:
        weight = parse_number(logged.weight)
        reps = parse_number(logged.reps)
        if weight is not None and reps is not None:
            volume += weight * reps
    return volume


def build_log_entries(
    session: Session,
    block: Block,
    athlete_id: str,
    duration_seconds: int,
) -> List[LogEntry]:
    """One workout-log row per exercise of a completed block."""
    entries = []
    for exercise in block.exercises:
        sets = [_logged_set(i, s) for i, s in enumerate(exercise.sets, start=1)]
        entries.append(
            LogEntry(
                athlete_id=athlete_id,
                exercise_id=exercise.catalog_key,
                exercise_name=exercise.name,
                workout_date=session.date_key,
                sets=sets,
                total_volume=total_volume(sets),
                duration_seconds=duration_seconds,
                session_id=session.id,
                block_id=block.id,
            )
        )
    return entries


def format_duration(seconds: Optional[int]) -> str:
    """
    Format seconds for display.

    >>> format_duration(75)
    '1:15'
    >>> format_duration(3725)
    '1:02:05'
    """
    seconds = max(0, int(seconds or 0))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
