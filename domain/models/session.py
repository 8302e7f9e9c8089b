"""
Session aggregate root.

A session is one scheduled unit of training on a specific date. Where it
came from decides how it is stored:

- CustomOrigin: the athlete created it; it owns one ``athlete_schedule``
  row identified by ``record_id``.
- PlanDerivedOrigin: it comes from a coach-assigned plan; its row is keyed
  by (athlete, date) and may not exist yet.

The origin is a tagged union on the entity itself, so persistence never has
to parse composite ``"{plan_id}-{session_id}"`` strings.
"""

from datetime import date as date_type, datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from domain.models.block import Block


class CustomOrigin(BaseModel):
    """Session created ad hoc by the athlete."""

    kind: Literal["custom"] = "custom"
    record_id: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)


class PlanDerivedOrigin(BaseModel):
    """Session instance coming from an athlete's assigned plan."""

    kind: Literal["plan-derived"] = "plan-derived"
    plan_id: str = Field(..., min_length=1)
    session_id: str = Field(..., min_length=1)
    plan_name: Optional[str] = None

    @property
    def composite_id(self) -> str:
        """Legacy display id used by older clients."""
        return f"{self.plan_id}-{self.session_id}"

    model_config = ConfigDict(frozen=True)


SessionOrigin = Annotated[
    Union[CustomOrigin, PlanDerivedOrigin], Field(discriminator="kind")
]


def all_blocks_completed(blocks: List[Block]) -> bool:
    """AND over block completion. A session without blocks is never complete."""
    return bool(blocks) and all(b.completed for b in blocks)


class Session(BaseModel):
    """
    Aggregate root for one training session on one date.

    ``completed`` is derived: it always equals the AND over the blocks'
    ``completed`` flags. Use :meth:`with_blocks` to replace blocks so the
    flag is recomputed against the new block list.

    Examples:
        >>> s = Session(
        ...     id="rec-1",
        ...     date=date_type(2024, 5, 6),
        ...     title="Legs",
        ...     origin=CustomOrigin(record_id="rec-1"),
        ...     blocks=[Block(id="b1", name="A")],
        ... )
        >>> s.is_plan_derived
        False
    """

    id: str = Field(..., min_length=1)
    date: date_type
    title: str = Field(default="Workout")
    origin: SessionOrigin
    blocks: List[Block] = Field(default_factory=list)
    completed: bool = False
    duration: int = Field(default=0, ge=0, description="Total active seconds")
    completed_at: Optional[datetime] = None

    @property
    def is_plan_derived(self) -> bool:
        return isinstance(self.origin, PlanDerivedOrigin)

    @property
    def is_custom(self) -> bool:
        return isinstance(self.origin, CustomOrigin)

    @property
    def date_key(self) -> str:
        return self.date.isoformat()

    @property
    def block_ids(self) -> List[str]:
        return [b.id for b in self.blocks]

    def with_blocks(self, blocks: List[Block]) -> "Session":
        """Return a copy with ``blocks`` replaced and completion recomputed."""
        blocks = list(blocks)
        return self.model_copy(
            update={"blocks": blocks, "completed": all_blocks_completed(blocks)}
        )

    def with_timing(
        self, duration: int, completed_at: Optional[datetime] = None
    ) -> "Session":
        return self.model_copy(
            update={"duration": duration, "completed_at": completed_at}
        )

    def workout_data(self) -> List[dict]:
        """Blocks serialized the way the ``workout_data`` column stores them."""
        return [b.model_dump(mode="json", by_alias=True) for b in self.blocks]

    model_config = ConfigDict(frozen=True)
