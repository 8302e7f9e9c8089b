"""
Domain converters between stored rows and the Session model.

- schedule_row_to_custom_session: athlete_schedule row -> custom Session
- plan_session_to_session: plan template (+ optional row) -> plan-derived Session
- session_to_schedule_fields: Session -> athlete_schedule columns
- parse_workout_data: workout_data JSON -> blocks

All converters are pure functions with no side effects.

Examples:
    >>> from domain.converters import session_to_schedule_fields
    >>> fields = session_to_schedule_fields(session)
"""

from domain.converters.db_converters import (
    parse_workout_data,
    plan_session_to_session,
    schedule_row_to_custom_session,
    session_to_schedule_fields,
)

__all__ = [
    "parse_workout_data",
    "plan_session_to_session",
    "schedule_row_to_custom_session",
    "session_to_schedule_fields",
]
