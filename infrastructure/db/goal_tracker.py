"""
Supabase Goal Tracker Implementation.

Automatic goal progress after training:
- STRENGTH goals tied to an exercise advance when a heavier weight was
  moved; each advance writes a ``goal_checkpoints`` row (source WORKOUT).
- CONSISTENCY goals are set to the number of completed sessions in the
  current Monday-Sunday week, counted on ``athlete_schedule``.

A goal whose current value reaches its target is marked ACHIEVED.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging

from supabase import Client

from application.exceptions import PersistenceFailure
from application.ports.goal_tracker import StrengthResult

logger = logging.getLogger(__name__)


def week_bounds(today: date) -> Tuple[date, date]:
    """Monday and Sunday of the week containing ``today``."""
    monday = today - timedelta(days=today.weekday())
    return monday, monday + timedelta(days=6)


def _format_weight(value: float) -> str:
    return f"{value:g}"


class SupabaseGoalTracker:
    """
    Supabase implementation of GoalTracker.
    """

    def __init__(self, client: Client, today: Optional[Callable[[], date]] = None):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
            today: Clock used for the consistency week (defaults to date.today)
        """
        self._client = client
        self._today = today or date.today

    # =========================================================================
    # STRENGTH
    # =========================================================================

    def record_strength_result(
        self,
        athlete_id: str,
        results: List[StrengthResult],
    ) -> None:
        if not results:
            return
        by_exercise = {r.exercise_id: r.max_weight for r in results}

        try:
            goals = self._client.table("goals") \
                .select("id, exercise_id, current_value, target_value") \
                .eq("athlete_id", athlete_id) \
                .eq("status", "ACTIVE") \
                .eq("goal_type", "STRENGTH") \
                .not_.is_("exercise_id", "null") \
                .execute()
        except Exception as e:
            logger.error(f"Error reading strength goals for {athlete_id}: {e}")
            raise PersistenceFailure("read strength goals", e) from e

        for goal in goals.data or []:
            weight = by_exercise.get(goal.get("exercise_id"))
            if weight is None or weight <= float(goal.get("current_value") or 0):
                continue
            self._add_checkpoint(goal, weight)

    def _add_checkpoint(self, goal: Dict[str, Any], weight: float) -> None:
        try:
            self._client.table("goal_checkpoints") \
                .insert({
                    "goal_id": goal["id"],
                    "value": weight,
                    "recorded_at": self._today().isoformat(),
                    "source": "WORKOUT",
                    "notes": f"Auto-tracked: {_format_weight(weight)}kg",
                }) \
                .execute()
        except Exception as e:
            logger.error(f"Error writing checkpoint for goal {goal['id']}: {e}")
            raise PersistenceFailure("insert goal checkpoint", e) from e

        self._update_progress(goal, weight)
        logger.info(f"Strength goal {goal['id']} advanced to {_format_weight(weight)}")

    # =========================================================================
    # CONSISTENCY
    # =========================================================================

    def record_consistency_event(
        self,
        athlete_id: str,
    ) -> None:
        try:
            goals = self._client.table("goals") \
                .select("id, current_value, target_value, start_date") \
                .eq("athlete_id", athlete_id) \
                .eq("status", "ACTIVE") \
                .eq("goal_type", "CONSISTENCY") \
                .execute()
        except Exception as e:
            logger.error(f"Error reading consistency goals for {athlete_id}: {e}")
            raise PersistenceFailure("read consistency goals", e) from e

        if not goals.data:
            return

        sessions_this_week = self.count_completed_this_week(athlete_id)
        for goal in goals.data:
            if goal.get("current_value") != sessions_this_week:
                self._update_progress(goal, sessions_this_week)

    def count_completed_this_week(self, athlete_id: str) -> int:
        monday, sunday = week_bounds(self._today())
        try:
            result = self._client.table("athlete_schedule") \
                .select("id", count="exact") \
                .eq("athlete_id", athlete_id) \
                .eq("completed", True) \
                .gte("date", monday.isoformat()) \
                .lte("date", sunday.isoformat()) \
                .execute()
        except Exception as e:
            logger.error(f"Error counting completed sessions for {athlete_id}: {e}")
            raise PersistenceFailure("count completed sessions", e) from e

        if result.count is not None:
            return result.count
        return len(result.data or [])

    # =========================================================================
    # Shared
    # =========================================================================

    def _update_progress(self, goal: Dict[str, Any], value: float) -> None:
        updates: Dict[str, Any] = {"current_value": value}
        target = goal.get("target_value")
        if target is not None and value >= float(target):
            updates["status"] = "ACHIEVED"
            updates["achieved_at"] = datetime.now(timezone.utc).isoformat()

        try:
            self._client.table("goals") \
                .update(updates) \
                .eq("id", goal["id"]) \
                .execute()
        except Exception as e:
            logger.error(f"Error updating goal {goal['id']}: {e}")
            raise PersistenceFailure("update goal", e) from e

        if updates.get("status") == "ACHIEVED":
            logger.info(f"Goal {goal['id']} achieved")
