"""
Supabase Assigned Plan Repository Implementation.

Reads the ``assigned_plans`` table: per athlete, a snapshot of the coach's
plan structure plus the date -> session schedule.
"""
from typing import List
import logging

from supabase import Client

from application.exceptions import PersistenceFailure
from application.ports.assigned_plan_repository import AssignedPlan

logger = logging.getLogger(__name__)


class SupabaseAssignedPlanRepository:
    """
    Supabase implementation of AssignedPlanRepository.
    """

    def __init__(self, client: Client):
        self._client = client

    def read_assigned_plans(
        self,
        athlete_id: str,
    ) -> List[AssignedPlan]:
        try:
            result = self._client.table("assigned_plans") \
                .select("id, athlete_id, plan_name, start_date, schedule, structure") \
                .eq("athlete_id", athlete_id) \
                .order("assigned_at", desc=True) \
                .execute()
        except Exception as e:
            logger.error(f"Error reading assigned plans for {athlete_id}: {e}")
            raise PersistenceFailure("read assigned plans", e) from e

        plans = []
        for row in result.data or []:
            try:
                plans.append(AssignedPlan.from_row(row))
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed assigned plan {row.get('id')}: {e}")
        return plans
