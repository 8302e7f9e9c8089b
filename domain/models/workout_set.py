"""
Set value object for the workout tree.

A set carries two families of values:
- target values, prescribed by the coach when the session is authored
- actual values, logged by the athlete while the session is running

Values are kept as strings because coaches write things like "8-10", "RPE 8"
or "1:30". Numeric helpers parse them on demand.

Stored JSON uses the camelCase keys of the `workout_data` column
(e.g. ``completedReps``, ``isCompleted``); use ``model_dump(by_alias=True)``
to produce it.
"""

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


TARGET_FIELDS = (
    "reps",
    "weight",
    "pct_1rm",
    "rpe",
    "distance",
    "time",
    "tempo",
    "rest",
    "notes",
)

ACTUAL_FIELDS = (
    "completed_reps",
    "completed_weight",
    "completed_rpe",
    "completed_distance",
    "completed_time",
)

# actual field -> target field it falls back to when nothing was logged
ACTUAL_TO_TARGET = {
    "completed_reps": "reps",
    "completed_weight": "weight",
    "completed_rpe": "rpe",
    "completed_distance": "distance",
    "completed_time": "time",
}

_NUMBER_RE = re.compile(r"-?\d+(?:[.,]\d+)?")


def parse_number(value: Optional[str]) -> Optional[float]:
    """
    Extract the first number from a free-text value.

    "100" -> 100.0, "82,5kg" -> 82.5, "8-10" -> 8.0, "" -> None.
    """
    if value is None:
        return None
    match = _NUMBER_RE.search(str(value))
    if not match:
        return None
    return float(match.group(0).replace(",", "."))


def parse_rest_seconds(value: Optional[str]) -> Optional[int]:
    """
    Parse a prescribed rest duration into seconds.

    Accepts "90", "90s", "90 sec", "1:30", "2min", "2 min", "1.5 min".
    Returns None when the value is empty, unparseable or not positive.
    """
    if value is None:
        return None
    text = str(value).strip().lower()
    if not text:
        return None

    if ":" in text:
        parts = text.split(":")
        if len(parts) == 2 and all(p.strip().isdigit() for p in parts):
            seconds = int(parts[0]) * 60 + int(parts[1])
            return seconds if seconds > 0 else None
        return None

    number = parse_number(text)
    if number is None or number <= 0:
        return None
    if "min" in text or text.endswith("m"):
        return int(round(number * 60))
    return int(round(number))


class SetType(str, Enum):
    """Kind of set as shown in the session editor."""

    NORMAL = "Normal"
    WARMUP = "Warmup"
    DROPSET = "Dropset"
    AMRAP = "AMRAP"


class WorkoutSet(BaseModel):
    """
    A single prescribed/logged unit of work within an exercise.

    Examples:
        >>> s = WorkoutSet(id="s1", reps="8", weight="100", rest="90")
        >>> s.prescribed_rest_seconds
        90
        >>> s.with_values(completed_reps="8").completed_reps
        '8'
    """

    id: str = Field(..., min_length=1)
    type: SetType = Field(default=SetType.NORMAL)

    # Target values (coach)
    reps: Optional[str] = None
    weight: Optional[str] = None
    pct_1rm: Optional[str] = Field(default=None, alias="pct_1rm")
    rpe: Optional[str] = None
    distance: Optional[str] = None
    time: Optional[str] = None
    tempo: Optional[str] = None
    rest: Optional[str] = None
    notes: Optional[str] = None

    # Actual values (athlete)
    completed_reps: Optional[str] = None
    completed_weight: Optional[str] = None
    completed_rpe: Optional[str] = None
    completed_distance: Optional[str] = None
    completed_time: Optional[str] = None
    is_completed: bool = False

    @property
    def prescribed_rest_seconds(self) -> Optional[int]:
        """Rest prescribed for this set, in seconds, if any."""
        return parse_rest_seconds(self.rest)

    def resolved(self, actual_field: str) -> Optional[str]:
        """Actual value for ``actual_field``, falling back to its target."""
        actual = getattr(self, actual_field)
        if actual not in (None, ""):
            return actual
        target = getattr(self, ACTUAL_TO_TARGET[actual_field])
        return target if target not in (None, "") else None

    @property
    def effective_weight(self) -> Optional[float]:
        """Numeric weight moved (actual, else target)."""
        return parse_number(self.resolved("completed_weight"))

    @property
    def effective_reps(self) -> Optional[float]:
        """Numeric reps performed (actual, else target)."""
        return parse_number(self.resolved("completed_reps"))

    def with_values(self, **values: Optional[str]) -> "WorkoutSet":
        """Return a copy with the given fields replaced."""
        return self.model_copy(update=values)

    def with_completion(self, is_completed: bool) -> "WorkoutSet":
        """Return a copy with ``is_completed`` set."""
        return self.model_copy(update={"is_completed": is_completed})

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=False,
    )
