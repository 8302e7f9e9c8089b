"""
Fake Workout Log Repository for testing.
"""
from typing import List
import uuid

from application.exceptions import PersistenceFailure
from application.ports import LogEntry


class FakeWorkoutLogRepository:
    """
    In-memory fake implementation of WorkoutLogRepository.

    Entries are kept in insertion order; read_recent_logs returns them newest
    first by workout_date, then by insertion order.
    """

    def __init__(self):
        self._entries: List[LogEntry] = []
        self.fail_reads = False
        self.fail_writes = False

    def reset(self) -> None:
        self._entries.clear()
        self.fail_reads = False
        self.fail_writes = False

    def seed(self, entries: List[LogEntry]) -> None:
        self._entries.extend(entries)

    def get_all(self) -> List[LogEntry]:
        return list(self._entries)

    def read_recent_logs(
        self,
        athlete_id: str,
        exercise_ids: List[str],
        limit: int = 50,
    ) -> List[LogEntry]:
        if self.fail_reads:
            raise PersistenceFailure("read workout logs", RuntimeError("store unavailable"))
        indexed = [
            (i, e) for i, e in enumerate(self._entries)
            if e.athlete_id == athlete_id and e.exercise_id in exercise_ids
        ]
        indexed.sort(key=lambda pair: (pair[1].workout_date, pair[0]), reverse=True)
        return [e for _, e in indexed[:limit]]

    def insert_logs(
        self,
        entries: List[LogEntry],
    ) -> List[str]:
        if self.fail_writes:
            raise PersistenceFailure("insert workout logs", RuntimeError("store unavailable"))
        ids = []
        for entry in entries:
            entry.id = entry.id or str(uuid.uuid4())
            self._entries.append(entry)
            ids.append(entry.id)
        return ids
