"""
Persistence reconciler.

Maps in-memory sessions onto the athlete_schedule store and back.

Write side: a session is stored according to its origin.
- Custom sessions own their row and are updated by record id.
- Plan-derived sessions are upserted on (athlete, date), so completing the
  same plan session any number of times leaves exactly one row.

Read side: load_sessions() merges schedule rows with the athlete's assigned
plans. A row overrides a plan template only when a row exists for the same
(plan_id, date); rows without a plan_id are custom sessions.
"""

import logging
from dataclasses import asdict
from datetime import date, datetime
from typing import Dict, List, Optional

from application.ports import (
    AssignedPlan,
    AssignedPlanRepository,
    PlanSessionTemplate,
    ScheduleRecord,
    ScheduleRepository,
)
from domain.converters import (
    plan_session_to_session,
    schedule_row_to_custom_session,
    session_to_schedule_fields,
)
from domain.models import CustomOrigin, PlanDerivedOrigin, Session

logger = logging.getLogger(__name__)

CUSTOM_PLAN_NAME = "Custom"


def _iso(value) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return str(value)[:10]


def _template_session(
    plan: AssignedPlan,
    template: PlanSessionTemplate,
    date_key: str,
    record: Optional[ScheduleRecord] = None,
) -> Session:
    return plan_session_to_session(
        plan_id=plan.id,
        plan_name=plan.plan_name,
        template_id=template.id,
        title=template.title,
        workout_data=template.workout_data,
        on_date=date_key,
        row=asdict(record) if record else None,
    )


class PersistenceReconciler:
    """
    Reads and writes sessions through the schedule and assigned-plan ports.

    Store errors surface as PersistenceFailure; callers decide whether they
    are fatal (the orchestrator logs them and carries on).
    """

    def __init__(
        self,
        schedule_repo: ScheduleRepository,
        plan_repo: Optional[AssignedPlanRepository] = None,
    ):
        self._schedule = schedule_repo
        self._plans = plan_repo

    # =========================================================================
    # Write side
    # =========================================================================

    def persist(self, session: Session, athlete_id: str) -> ScheduleRecord:
        """
        Write the session's blocks and completion state to its schedule row.

        Returns:
            The stored row
        """
        fields = session_to_schedule_fields(session)
        origin = session.origin

        if isinstance(origin, CustomOrigin):
            fields.pop("plan_id", None)
            fields.pop("plan_name", None)
            record = self._schedule.update(origin.record_id, fields)
            logger.info(f"Updated custom session {origin.record_id} ({session.date_key})")
            return record

        if isinstance(origin, PlanDerivedOrigin):
            record = self._schedule.upsert(athlete_id, session.date_key, fields)
            logger.info(
                f"Upserted plan session {origin.composite_id} for athlete {athlete_id} on {session.date_key}"
            )
            return record

        raise TypeError(f"Unsupported session origin: {type(origin).__name__}")

    def create_custom_session(
        self,
        athlete_id: str,
        on_date,
        title: str,
    ) -> Session:
        """
        Create an empty custom session on a date.

        Returns:
            The new session, owning the inserted row
        """
        date_key = _iso(on_date)
        record_id = self._schedule.insert({
            "athlete_id": athlete_id,
            "date": date_key,
            "plan_id": None,
            "plan_name": CUSTOM_PLAN_NAME,
            "session_title": title,
            "workout_data": [],
            "completed": False,
        })
        logger.info(f"Created custom session {record_id} for athlete {athlete_id} on {date_key}")
        return Session(
            id=record_id,
            date=date_key,
            title=title,
            origin=CustomOrigin(record_id=record_id),
        )

    def remove_session(self, session: Session, athlete_id: str) -> bool:
        """
        Remove a session from the athlete's schedule.

        Custom sessions are deleted. For plan-derived sessions only the stored
        row for that date is deleted, so the untouched plan template shows up
        again on the next load.

        Returns:
            True if a row was deleted
        """
        origin = session.origin
        if isinstance(origin, CustomOrigin):
            return self._schedule.delete(origin.record_id)

        if isinstance(origin, PlanDerivedOrigin):
            date_key = session.date_key
            records = self._schedule.read_range(athlete_id, date_key, date_key)
            deleted = False
            for record in records:
                if record.plan_id == origin.plan_id:
                    deleted = self._schedule.delete(record.id) or deleted
            if not deleted:
                logger.debug(f"No stored row for plan session {origin.composite_id} on {date_key}")
            return deleted

        raise TypeError(f"Unsupported session origin: {type(origin).__name__}")

    # =========================================================================
    # Read side
    # =========================================================================

    def load_sessions(
        self,
        athlete_id: str,
        date_from,
        date_to,
    ) -> Dict[str, List[Session]]:
        """
        All sessions of an athlete between two dates (inclusive), by ISO date.

        Plan sessions come first on each date, in assignment order, followed
        by custom sessions.
        """
        date_from, date_to = _iso(date_from), _iso(date_to)
        records = self._schedule.read_range(athlete_id, date_from, date_to)
        plans = self._plans.read_assigned_plans(athlete_id) if self._plans else []

        plan_records: Dict[tuple, ScheduleRecord] = {}
        custom_records: List[ScheduleRecord] = []
        for record in records:
            if record.is_custom:
                custom_records.append(record)
            else:
                plan_records[(record.plan_id, record.date)] = record

        by_date: Dict[str, List[Session]] = {}
        used_keys = set()

        for plan in plans:
            for date_key, template_id in sorted(plan.schedule.items()):
                date_key = _iso(date_key)
                if not (date_from <= date_key <= date_to):
                    continue
                template = plan.find_session(template_id)
                if template is None:
                    logger.warning(f"Plan {plan.id} schedules unknown session {template_id} on {date_key}")
                    continue
                record = plan_records.get((plan.id, date_key))
                if record is not None:
                    used_keys.add((plan.id, date_key))
                session = _template_session(plan, template, date_key, record)
                by_date.setdefault(date_key, []).append(session)

        for key in set(plan_records) - used_keys:
            logger.debug(f"Ignoring schedule row for plan {key[0]} on {key[1]}: not in any assigned plan")

        for record in custom_records:
            session = schedule_row_to_custom_session(asdict(record))
            by_date.setdefault(record.date, []).append(session)

        return by_date

    def plan_template(self, session: Session, athlete_id: str) -> Optional[Session]:
        """
        The untouched plan prescription behind a plan-derived session.

        Returns:
            The pristine session for the same date, or None when the plan is
            no longer assigned or no longer holds the template

        Raises:
            TypeError: if the session is not plan-derived
            PersistenceFailure: on store error
        """
        origin = session.origin
        if not isinstance(origin, PlanDerivedOrigin):
            raise TypeError(f"Session {session.id} is not plan-derived")
        plans = self._plans.read_assigned_plans(athlete_id) if self._plans else []
        for plan in plans:
            if plan.id != origin.plan_id:
                continue
            template = plan.find_session(origin.session_id)
            if template is None:
                return None
            return _template_session(plan, template, session.date_key)
        return None

    def load_day(self, athlete_id: str, on_date) -> List[Session]:
        date_key = _iso(on_date)
        return self.load_sessions(athlete_id, date_key, date_key).get(date_key, [])
