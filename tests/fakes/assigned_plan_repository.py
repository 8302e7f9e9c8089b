"""
Fake Assigned Plan Repository for testing.
"""
from typing import Any, Dict, List

from application.exceptions import PersistenceFailure
from application.ports import AssignedPlan


class FakeAssignedPlanRepository:
    """
    In-memory fake implementation of AssignedPlanRepository.

    Rows use the ``assigned_plans`` column layout, so seeding goes through
    AssignedPlan.from_row just like the Supabase adapter.
    """

    def __init__(self):
        self._rows: List[Dict[str, Any]] = []
        self.fail = False

    def reset(self) -> None:
        self._rows.clear()
        self.fail = False

    def seed(self, rows: List[Dict[str, Any]]) -> None:
        """Seed plans, newest assignment first."""
        self._rows.extend(rows)

    def get_all(self) -> List[Dict[str, Any]]:
        return list(self._rows)

    def read_assigned_plans(
        self,
        athlete_id: str,
    ) -> List[AssignedPlan]:
        if self.fail:
            raise PersistenceFailure("read assigned plans", RuntimeError("store unavailable"))
        return [AssignedPlan.from_row(r) for r in self._rows if r.get("athlete_id") == athlete_id]
