"""
Assigned Plan Repository Interface (Port).

Read-only access to the plans a coach has assigned to an athlete. Each
assigned plan is a snapshot of the coach's plan structure plus a schedule
mapping dates to the session scheduled on that date.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


@dataclass
class PlanSessionTemplate:
    """A session as authored in the plan (pristine, never completed)."""
    id: str
    title: str = "Workout"
    day_of_week: Optional[int] = None
    order: int = 0
    workout_data: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class AssignedPlan:
    """A plan assigned to an athlete."""
    id: str
    athlete_id: str
    plan_name: str = ""
    start_date: Optional[str] = None  # ISO date of week 1
    schedule: Dict[str, str] = field(default_factory=dict)  # ISO date -> session id
    weeks: List[List[PlanSessionTemplate]] = field(default_factory=list)

    def find_session(self, session_id: str) -> Optional[PlanSessionTemplate]:
        """Look up a session template anywhere in the plan structure."""
        for week in self.weeks:
            for session in week:
                if session.id == session_id:
                    return session
        return None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "AssignedPlan":
        structure = row.get("structure") or {}
        weeks = []
        for week in structure.get("weeks") or []:
            sessions = []
            for s in week.get("sessions") or []:
                sessions.append(PlanSessionTemplate(
                    id=str(s["id"]),
                    title=s.get("title") or "Workout",
                    day_of_week=s.get("dayOfWeek"),
                    order=s.get("order") or 0,
                    workout_data=s.get("workoutData") or [],
                ))
            weeks.append(sessions)
        return cls(
            id=str(row["id"]),
            athlete_id=row.get("athlete_id", ""),
            plan_name=row.get("plan_name") or "",
            start_date=row.get("start_date"),
            schedule=dict(row.get("schedule") or {}),
            weeks=weeks,
        )


class AssignedPlanRepository(Protocol):
    """
    Abstract interface for reading an athlete's assigned plans.
    """

    def read_assigned_plans(
        self,
        athlete_id: str,
    ) -> List[AssignedPlan]:
        """
        Get every plan assigned to an athlete, newest assignment first.

        Args:
            athlete_id: Athlete user ID

        Returns:
            List of AssignedPlan with schedule and structure

        Raises:
            PersistenceFailure: on store error
        """
        ...
