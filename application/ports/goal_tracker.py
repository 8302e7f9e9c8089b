"""
Goal Tracker Interface (Port).

Goal auto-tracking runs as a side effect of completing a block:
- strength goals receive the heaviest weight moved per exercise
- consistency goals receive a "session completed" event

Both calls are fire-and-forget from the engine's point of view; a failure
never affects the session being executed.
"""
from dataclasses import dataclass
from typing import List, Protocol


@dataclass
class StrengthResult:
    """Heaviest weight moved for one exercise in one block."""
    exercise_id: str
    max_weight: float


class GoalTracker(Protocol):
    """
    Abstract interface for automatic goal progress updates.
    """

    def record_strength_result(
        self,
        athlete_id: str,
        results: List[StrengthResult],
    ) -> None:
        """
        Advance active STRENGTH goals whose exercise matches a result.

        A goal only advances when the new weight exceeds its current value.

        Raises:
            PersistenceFailure: on store error
        """
        ...

    def record_consistency_event(
        self,
        athlete_id: str,
    ) -> None:
        """
        Refresh active CONSISTENCY goals after a completed session.

        Raises:
            PersistenceFailure: on store error
        """
        ...
