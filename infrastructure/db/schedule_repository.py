"""
Supabase Schedule Repository Implementation.

This module implements the ScheduleRepository protocol using Supabase as the
backend. Rows live in the ``athlete_schedule`` table.
"""
from typing import Any, Dict, List
import logging

from supabase import Client

from application.exceptions import PersistenceFailure
from application.ports.schedule_repository import ScheduleRecord

logger = logging.getLogger(__name__)

TABLE = "athlete_schedule"
UPSERT_CONFLICT_COLUMNS = "athlete_id,date,plan_id"


class SupabaseScheduleRepository:
    """
    Supabase implementation of ScheduleRepository.

    Every store error is wrapped in PersistenceFailure.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
        """
        self._client = client

    def read_range(
        self,
        athlete_id: str,
        date_from: str,
        date_to: str,
    ) -> List[ScheduleRecord]:
        try:
            result = self._client.table(TABLE) \
                .select("*") \
                .eq("athlete_id", athlete_id) \
                .gte("date", date_from) \
                .lte("date", date_to) \
                .order("date") \
                .execute()
        except Exception as e:
            logger.error(f"Error reading schedule for {athlete_id} ({date_from}..{date_to}): {e}")
            raise PersistenceFailure("read schedule", e) from e

        return [ScheduleRecord.from_row(row) for row in result.data or []]

    def upsert(
        self,
        athlete_id: str,
        date: str,
        fields: Dict[str, Any],
    ) -> ScheduleRecord:
        if not fields.get("plan_id"):
            raise ValueError("upsert needs a plan_id; custom rows are written with update()")
        row = {**fields, "athlete_id": athlete_id, "date": date}
        try:
            # Conflict target matches the unique index on (athlete_id, date, plan_id).
            # Custom rows carry a NULL plan_id and never conflict with it.
            result = self._client.table(TABLE) \
                .upsert(row, on_conflict=UPSERT_CONFLICT_COLUMNS) \
                .execute()
        except Exception as e:
            logger.error(f"Error upserting schedule row for {athlete_id} on {date}: {e}")
            raise PersistenceFailure("upsert schedule", e) from e

        if not result.data:
            raise PersistenceFailure(f"upsert schedule for {athlete_id} on {date} returned no row")
        return ScheduleRecord.from_row(result.data[0])

    def update(
        self,
        record_id: str,
        fields: Dict[str, Any],
    ) -> ScheduleRecord:
        try:
            result = self._client.table(TABLE) \
                .update(fields) \
                .eq("id", record_id) \
                .execute()
        except Exception as e:
            logger.error(f"Error updating schedule row {record_id}: {e}")
            raise PersistenceFailure("update schedule", e) from e

        if not result.data:
            raise PersistenceFailure(f"update schedule row {record_id} (not found)")
        return ScheduleRecord.from_row(result.data[0])

    def insert(
        self,
        fields: Dict[str, Any],
    ) -> str:
        try:
            result = self._client.table(TABLE) \
                .insert(fields) \
                .execute()
        except Exception as e:
            logger.error(f"Error inserting schedule row: {e}")
            raise PersistenceFailure("insert schedule", e) from e

        if not result.data:
            raise PersistenceFailure("insert schedule returned no row")
        return str(result.data[0]["id"])

    def delete(
        self,
        record_id: str,
    ) -> bool:
        try:
            result = self._client.table(TABLE) \
                .delete() \
                .eq("id", record_id) \
                .execute()
        except Exception as e:
            logger.error(f"Error deleting schedule row {record_id}: {e}")
            raise PersistenceFailure("delete schedule", e) from e

        return bool(result.data)
