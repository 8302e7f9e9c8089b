"""
Converters: schedule rows and plan templates <-> domain Session.

Provides conversion between Supabase ``athlete_schedule`` rows (and the
session templates of an assigned plan) and the Session domain model.

Database schema (athlete_schedule table):
- id: UUID
- athlete_id: User ID
- date: DATE, one row per (athlete_id, date) for plan-derived sessions
- plan_id: Assigned plan ID, NULL for custom sessions
- plan_name: Plan display name ("Custom" for custom sessions)
- session_title: Title shown in the calendar
- workout_data: JSONB (list of blocks, camelCase keys)
- completed, duration, completed_at: Completion tracking
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from domain.models import Block, CustomOrigin, PlanDerivedOrigin, Session

logger = logging.getLogger(__name__)


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Parse datetime from various formats."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            # Try ISO format with Z suffix
            if value.endswith("Z"):
                value = value[:-1] + "+00:00"
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_workout_data(workout_data: Any) -> List[Block]:
    """
    Parse the stored ``workout_data`` list into blocks.

    Blocks that fail validation are skipped with a warning so one malformed
    block does not hide the rest of the session.
    """
    if not workout_data:
        return []

    blocks: List[Block] = []
    for raw in workout_data:
        try:
            blocks.append(Block.model_validate(raw))
        except ValidationError as e:
            block_id = raw.get("id") if isinstance(raw, dict) else None
            logger.warning(f"Skipping invalid block {block_id}: {e.error_count()} error(s)")
    return blocks


def schedule_row_to_custom_session(row: Dict[str, Any]) -> Session:
    """
    Convert a custom ``athlete_schedule`` row (no plan_id) to a Session.

    Examples:
        >>> row = {
        ...     "id": "rec-1",
        ...     "date": "2024-05-06",
        ...     "session_title": "Arms",
        ...     "workout_data": [],
        ... }
        >>> schedule_row_to_custom_session(row).origin.record_id
        'rec-1'
    """
    record_id = str(row["id"])
    blocks = parse_workout_data(row.get("workout_data"))
    session = Session(
        id=record_id,
        date=_parse_date(row["date"]),
        title=row.get("session_title") or "Workout",
        origin=CustomOrigin(record_id=record_id),
    ).with_blocks(blocks)
    return session.with_timing(
        duration=int(row.get("duration") or 0),
        completed_at=_parse_datetime(row.get("completed_at")),
    )


def plan_session_to_session(
    plan_id: str,
    plan_name: Optional[str],
    template_id: str,
    title: str,
    workout_data: Any,
    on_date: Any,
    row: Optional[Dict[str, Any]] = None,
) -> Session:
    """
    Build a plan-derived Session for one date.

    Without ``row`` the pristine template is returned. With ``row`` (the
    athlete_schedule record stored for this plan and date) its
    workout_data and completion fields override the template.
    """
    origin = PlanDerivedOrigin(plan_id=plan_id, session_id=template_id, plan_name=plan_name)
    data = workout_data
    if row is not None and row.get("workout_data"):
        data = row["workout_data"]

    session = Session(
        id=origin.composite_id,
        date=_parse_date(on_date),
        title=title or "Workout",
        origin=origin,
    ).with_blocks(parse_workout_data(data))

    if row is None:
        return session
    return session.with_timing(
        duration=int(row.get("duration") or 0),
        completed_at=_parse_datetime(row.get("completed_at")),
    )


def session_to_schedule_fields(
    session: Session,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Convert a Session to the mutable columns of its schedule row.

    ``completed_at`` falls back to ``now`` when the session is completed
    but has no timestamp yet, and is cleared when it is not completed.

    Examples:
        >>> from domain.models import CustomOrigin
        >>> s = Session(id="r", date="2024-05-06", origin=CustomOrigin(record_id="r"))
        >>> session_to_schedule_fields(s)["completed"]
        False
    """
    completed_at = None
    if session.completed:
        completed_at = session.completed_at or now or datetime.now(timezone.utc)

    fields: Dict[str, Any] = {
        "session_title": session.title,
        "workout_data": session.workout_data(),
        "completed": session.completed,
        "duration": session.duration,
        "completed_at": completed_at.isoformat() if completed_at else None,
    }

    if isinstance(session.origin, PlanDerivedOrigin):
        fields["plan_id"] = session.origin.plan_id
        fields["plan_name"] = session.origin.plan_name

    return fields
