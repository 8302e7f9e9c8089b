"""
Schedule Repository Interface (Port).

Defines the contract for the athlete's dated schedule: one row per scheduled
session in the ``athlete_schedule`` table. Custom sessions own their row by
id; plan-derived sessions are keyed by (athlete_id, date) and get a row only
once something about them has been recorded.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


# Columns written when a session is persisted
SCHEDULE_MUTABLE_FIELDS = (
    "plan_id",
    "plan_name",
    "session_title",
    "workout_data",
    "completed",
    "duration",
    "completed_at",
)


@dataclass
class ScheduleRecord:
    """A row of the athlete schedule."""
    id: str
    athlete_id: str
    date: str  # ISO format YYYY-MM-DD
    plan_id: Optional[str] = None
    plan_name: Optional[str] = None
    session_title: Optional[str] = None
    workout_data: Optional[List[Dict[str, Any]]] = None
    completed: bool = False
    duration: Optional[int] = None
    completed_at: Optional[str] = None  # ISO format
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_custom(self) -> bool:
        return not self.plan_id

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ScheduleRecord":
        known = {
            "id", "athlete_id", "date", "plan_id", "plan_name", "session_title",
            "workout_data", "completed", "duration", "completed_at",
        }
        return cls(
            id=str(row["id"]),
            athlete_id=row["athlete_id"],
            date=str(row["date"])[:10],
            plan_id=row.get("plan_id"),
            plan_name=row.get("plan_name"),
            session_title=row.get("session_title"),
            workout_data=row.get("workout_data"),
            completed=bool(row.get("completed") or False),
            duration=row.get("duration"),
            completed_at=row.get("completed_at"),
            extra={k: v for k, v in row.items() if k not in known},
        )


class ScheduleRepository(Protocol):
    """
    Abstract interface for athlete schedule persistence.

    Implementations raise application.exceptions.PersistenceFailure on any
    store error; callers decide whether the failure is fatal.
    """

    def read_range(
        self,
        athlete_id: str,
        date_from: str,
        date_to: str,
    ) -> List[ScheduleRecord]:
        """
        Get all schedule rows of an athlete between two dates (inclusive).

        Args:
            athlete_id: Athlete user ID
            date_from: ISO date, inclusive
            date_to: ISO date, inclusive

        Returns:
            Rows ordered by date ascending
        """
        ...

    def upsert(
        self,
        athlete_id: str,
        date: str,
        fields: Dict[str, Any],
    ) -> ScheduleRecord:
        """
        Insert or update the plan row keyed by (athlete_id, date, plan_id).

        ``fields`` must carry the plan_id. Custom rows on the same date are
        never overwritten, and neither are rows of other plans. If a row
        exists for the key its mutable fields are overwritten, otherwise a
        new row is inserted. Never creates two rows for one key.

        Returns:
            The stored row

        Raises:
            ValueError: if ``fields`` has no plan_id
        """
        ...

    def update(
        self,
        record_id: str,
        fields: Dict[str, Any],
    ) -> ScheduleRecord:
        """
        Update the given fields of an existing row.

        Raises:
            PersistenceFailure: if the row does not exist or the write fails
        """
        ...

    def insert(
        self,
        fields: Dict[str, Any],
    ) -> str:
        """
        Insert a new row.

        Returns:
            The new row ID
        """
        ...

    def delete(
        self,
        record_id: str,
    ) -> bool:
        """
        Delete a row.

        Returns:
            True if a row was deleted, False if none matched
        """
        ...
