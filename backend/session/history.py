"""
History and personal-best lookup.

When a block becomes active, each of its exercises is annotated with what
the athlete did the last time they performed it and with their heaviest
logged weight. Both come from the workout log. Lookup failures are never
fatal: the caller logs them and shows the block without annotations.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from application.exceptions import HistoryLookupFailure
from application.ports import LogEntry, LoggedSet, WorkoutLogRepository
from domain.models import parse_number

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


@dataclass(frozen=True)
class PersonalBest:
    weight: float
    reps: Optional[float] = None
    workout_date: Optional[str] = None


@dataclass(frozen=True)
class ExerciseHistory:
    """Annotation for one catalog exercise."""
    exercise_id: str
    last_workout_date: Optional[str] = None
    last_sets: List[LoggedSet] = field(default_factory=list)
    personal_best: Optional[PersonalBest] = None


def _best_of(entry: LogEntry) -> Optional[PersonalBest]:
    best = None
    for logged in entry.sets:
        weight = parse_number(logged.weight)
        reps = parse_number(logged.reps)
        # A weight with no reps performed is not a lift
        if weight is None or not reps or reps <= 0:
            continue
        if best is None or weight > best.weight:
            best = PersonalBest(weight=weight, reps=reps, workout_date=entry.workout_date)
    return best


def summarize(exercise_id: str, entries: Iterable[LogEntry]) -> ExerciseHistory:
    """
    Build the annotation for one exercise from its log rows.

    ``entries`` must be ordered newest first.
    """
    last: Optional[LogEntry] = None
    best: Optional[PersonalBest] = None
    for entry in entries:
        if entry.exercise_id != exercise_id:
            continue
        if last is None:
            last = entry
        candidate = _best_of(entry)
        if candidate and (best is None or candidate.weight > best.weight):
            best = candidate
    return ExerciseHistory(
        exercise_id=exercise_id,
        last_workout_date=last.workout_date if last else None,
        last_sets=list(last.sets) if last else [],
        personal_best=best,
    )


class HistoryLookup:
    """
    Reads recent workout logs and turns them into per-exercise annotations.
    """

    def __init__(self, log_repo: WorkoutLogRepository, limit: int = DEFAULT_HISTORY_LIMIT):
        self._log_repo = log_repo
        self._limit = limit

    def lookup(self, athlete_id: str, exercise_ids: List[str]) -> Dict[str, ExerciseHistory]:
        """
        Annotations for the given catalog exercises.

        Exercises never logged before are left out of the result.

        Raises:
            HistoryLookupFailure: if the log store cannot be read
        """
        exercise_ids = [e for e in dict.fromkeys(exercise_ids) if e]
        if not exercise_ids:
            return {}

        try:
            entries = self._log_repo.read_recent_logs(athlete_id, exercise_ids, limit=self._limit)
        except Exception as e:
            raise HistoryLookupFailure(athlete_id, e) from e

        result: Dict[str, ExerciseHistory] = {}
        for exercise_id in exercise_ids:
            history = summarize(exercise_id, entries)
            if history.last_workout_date is not None:
                result[exercise_id] = history
        logger.debug(f"History for {len(result)}/{len(exercise_ids)} exercises of athlete {athlete_id}")
        return result
