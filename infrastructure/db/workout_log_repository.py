"""
Supabase Workout Log Repository Implementation.

One ``workout_logs`` row per exercise per completed block. Rows are the
source of the history and personal-best annotations.
"""
from typing import List
import logging

from supabase import Client

from application.exceptions import PersistenceFailure
from application.ports.workout_log_repository import LogEntry

logger = logging.getLogger(__name__)


class SupabaseWorkoutLogRepository:
    """
    Supabase implementation of WorkoutLogRepository.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
        """
        self._client = client

    def read_recent_logs(
        self,
        athlete_id: str,
        exercise_ids: List[str],
        limit: int = 50,
    ) -> List[LogEntry]:
        if not exercise_ids:
            return []
        try:
            result = self._client.table("workout_logs") \
                .select("*") \
                .eq("athlete_id", athlete_id) \
                .in_("exercise_id", exercise_ids) \
                .order("workout_date", desc=True) \
                .order("created_at", desc=True) \
                .limit(limit) \
                .execute()
        except Exception as e:
            logger.error(f"Error reading workout logs for {athlete_id}: {e}")
            raise PersistenceFailure("read workout logs", e) from e

        return [LogEntry.from_row(row) for row in result.data or []]

    def insert_logs(
        self,
        entries: List[LogEntry],
    ) -> List[str]:
        if not entries:
            return []
        try:
            result = self._client.table("workout_logs") \
                .insert([entry.to_row() for entry in entries]) \
                .execute()
        except Exception as e:
            logger.error(f"Error inserting {len(entries)} workout log(s): {e}")
            raise PersistenceFailure("insert workout logs", e) from e

        ids = [str(row["id"]) for row in result.data or [] if row.get("id")]
        logger.info(f"Inserted {len(ids)} workout log(s) for {entries[0].athlete_id}")
        return ids
