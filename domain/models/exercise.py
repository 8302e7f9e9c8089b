"""
Exercise entry within a session block.

An entry references a catalog exercise (``exercise_id``) and carries the
ordered sets prescribed for it in this particular session.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from domain.models.workout_set import WorkoutSet


Metric = Literal["reps", "weight", "pct_1rm", "rpe", "distance", "time", "tempo"]

DEFAULT_VISIBLE_METRICS: List[str] = ["reps", "weight"]


class SessionExercise(BaseModel):
    """
    Value object for one exercise inside a block.

    ``visible_metrics`` controls which set columns are shown to the athlete;
    it has no effect on what is persisted.

    Examples:
        >>> ex = SessionExercise(
        ...     id="ex1",
        ...     exercise_id="back-squat",
        ...     name="Back Squat",
        ...     sets=[WorkoutSet(id="s1", reps="5", weight="100")],
        ... )
        >>> ex.set_count
        1
    """

    id: str = Field(..., min_length=1)
    exercise_id: Optional[str] = Field(
        default=None, description="Reference to the global exercise catalog"
    )
    name: str = Field(default="", description="Denormalized display name")
    visible_metrics: List[Metric] = Field(
        default_factory=lambda: list(DEFAULT_VISIBLE_METRICS)
    )
    video_url: Optional[str] = None
    notes: Optional[str] = None
    sets: List[WorkoutSet] = Field(default_factory=list)

    @property
    def set_count(self) -> int:
        return len(self.sets)

    @property
    def completed_set_count(self) -> int:
        return sum(1 for s in self.sets if s.is_completed)

    @property
    def catalog_key(self) -> str:
        """Key used for history lookups: catalog id, else the entry id."""
        return self.exercise_id or self.id

    def max_weight(self) -> Optional[float]:
        """Heaviest actual (else target) weight across sets, if any."""
        weights = [w for w in (s.effective_weight for s in self.sets) if w is not None]
        return max(weights) if weights else None

    def with_sets(self, sets: List[WorkoutSet]) -> "SessionExercise":
        return self.model_copy(update={"sets": list(sets)})

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )
