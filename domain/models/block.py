"""
Block value object for the workout tree.

A block groups exercises that are executed together under one mode.
Block order inside a session is the list order; it is stable and
contiguous, and auto-progression relies on it.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from domain.models.exercise import SessionExercise


class BlockMode(str, Enum):
    """
    How the exercises of a block are performed.

    - SEQUENTIAL: all sets of one exercise, then the next
    - SUPERSET: exercises alternated back-to-back
    - CIRCUIT: exercises in sequence, repeated for ``rounds``
    """

    SEQUENTIAL = "Sequential"
    SUPERSET = "Superset"
    CIRCUIT = "Circuit"

    @classmethod
    def _missing_(cls, value: Any) -> Optional["BlockMode"]:
        # Older workout_data rows store straight blocks as "Normal".
        if isinstance(value, str) and value.lower() in ("normal", "straight", "sequential"):
            return cls.SEQUENTIAL
        return None


class Block(BaseModel):
    """
    Value object representing one block of a session.

    Examples:
        >>> block = Block(id="b1", name="A", mode=BlockMode.CIRCUIT, rounds=3)
        >>> block.is_circuit
        True
    """

    id: str = Field(..., min_length=1)
    name: str = Field(default="", description="Block label, e.g. 'A' or 'Warm-up'")
    mode: BlockMode = Field(default=BlockMode.SEQUENTIAL, alias="type")
    rounds: Optional[int] = Field(default=None, ge=1)
    rest_between_rounds: Optional[int] = Field(
        default=None, ge=0, description="Seconds of rest between circuit rounds"
    )
    exercises: List[SessionExercise] = Field(default_factory=list)
    completed: bool = Field(default=False, alias="isCompleted")

    @field_validator("rounds", "rest_between_rounds", mode="before")
    @classmethod
    def coerce_numeric_string(cls, v: Any) -> Any:
        """Stored rows keep these as strings ("3", ""); accept both."""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            return int(float(v))
        return v

    @property
    def is_circuit(self) -> bool:
        return self.mode == BlockMode.CIRCUIT

    @property
    def exercise_count(self) -> int:
        return len(self.exercises)

    @property
    def total_sets(self) -> int:
        return sum(ex.set_count for ex in self.exercises)

    def with_exercises(self, exercises: List[SessionExercise]) -> "Block":
        return self.model_copy(update={"exercises": list(exercises)})

    def mark_completed(self, completed: bool = True) -> "Block":
        return self.model_copy(update={"completed": completed})

    def __str__(self) -> str:
        names = ", ".join(ex.name for ex in self.exercises[:3])
        if len(self.exercises) > 3:
            names += f" (+{len(self.exercises) - 3} more)"
        return f"{self.name or self.id} ({self.mode.value}) [{names}]"

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )
