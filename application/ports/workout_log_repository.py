"""
Workout Log Repository Interface (Port).

One log row is written per exercise each time a block is completed. The
rows are the athlete's training history and feed the "last time" and
personal-best annotations shown while a block is active.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Protocol


@dataclass
class LoggedSet:
    """A single set as recorded in the history."""
    set_number: int
    type: str = "Normal"
    reps: Optional[str] = None
    weight: Optional[str] = None
    rpe: Optional[str] = None
    distance: Optional[str] = None
    time: Optional[str] = None
    completed: bool = False


@dataclass
class LogEntry:
    """One exercise performed in one session."""
    athlete_id: str
    exercise_id: str
    exercise_name: str
    workout_date: str  # ISO format
    sets: List[LoggedSet] = field(default_factory=list)
    total_volume: float = 0.0
    duration_seconds: int = 0
    session_id: Optional[str] = None
    block_id: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        row = {
            "athlete_id": self.athlete_id,
            "exercise_id": self.exercise_id,
            "exercise_name": self.exercise_name,
            "workout_date": self.workout_date,
            "sets": [asdict(s) for s in self.sets],
            "total_volume": self.total_volume,
            "duration_seconds": self.duration_seconds,
            "session_id": self.session_id,
            "block_id": self.block_id,
        }
        if self.id:
            row["id"] = self.id
        return row

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "LogEntry":
        sets = []
        for idx, s in enumerate(row.get("sets") or []):
            sets.append(LoggedSet(
                set_number=s.get("set_number", idx + 1),
                type=s.get("type") or "Normal",
                reps=s.get("reps"),
                weight=s.get("weight"),
                rpe=s.get("rpe"),
                distance=s.get("distance"),
                time=s.get("time"),
                completed=bool(s.get("completed", False)),
            ))
        return cls(
            id=row.get("id"),
            athlete_id=row.get("athlete_id", ""),
            exercise_id=row.get("exercise_id", ""),
            exercise_name=row.get("exercise_name") or "",
            workout_date=str(row.get("workout_date", ""))[:10],
            sets=sets,
            total_volume=float(row.get("total_volume") or 0),
            duration_seconds=int(row.get("duration_seconds") or 0),
            session_id=row.get("session_id"),
            block_id=row.get("block_id"),
            created_at=row.get("created_at"),
        )


class WorkoutLogRepository(Protocol):
    """
    Abstract interface for workout history persistence.
    """

    def read_recent_logs(
        self,
        athlete_id: str,
        exercise_ids: List[str],
        limit: int = 50,
    ) -> List[LogEntry]:
        """
        Get the most recent log rows for the given exercises.

        Args:
            athlete_id: Athlete user ID
            exercise_ids: Catalog exercise IDs to include
            limit: Maximum rows to return

        Returns:
            Rows ordered newest first (workout_date, then created_at)

        Raises:
            PersistenceFailure: on store error
        """
        ...

    def insert_logs(
        self,
        entries: List[LogEntry],
    ) -> List[str]:
        """
        Store log rows.

        Returns:
            IDs of the inserted rows

        Raises:
            PersistenceFailure: on store error
        """
        ...
