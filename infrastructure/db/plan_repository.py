"""
Supabase implementation of PlanRepository.

Queries against:
- plans: plan metadata, at most one active row per user
- plan_days: weekdays within a plan (0=Sunday .. 6=Saturday)
- plan_exercises: prescribed exercises within a day

Multi-row writes go through PostgreSQL functions (see
migrations/0001_liftlog_schema.sql) so they run in one transaction.
"""

import logging
from typing import Any, Dict, List, Optional

from supabase import Client

from application.exceptions import PlanPersistenceError

logger = logging.getLogger(__name__)


class SupabasePlanRepository:
    """
    Supabase-backed plan repository implementation.
    """

    def __init__(self, client: Client):
        """
        Initialize repository with Supabase client.

        Args:
            client: Authenticated Supabase client
        """
        self._client = client

    def list_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Get all plans for a user.

        Args:
            user_id: The user's ID

        Returns:
            List of plan dictionaries, newest first
        """
        response = (
            self._client.table("plans")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    def get_by_id(self, plan_id: str) -> Optional[Dict[str, Any]]:
        response = (
            self._client.table("plans")
            .select("*")
            .eq("id", plan_id)
            .execute()
        )
        return response.data[0] if response.data else None

    def get_active(self, user_id: str) -> Optional[Dict[str, Any]]:
        response = (
            self._client.table("plans")
            .select("*")
            .eq("user_id", user_id)
            .eq("active", True)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def get_days(self, plan_id: str) -> List[Dict[str, Any]]:
        """
        Get all days for a plan with their exercises.

        Args:
            plan_id: The plan's UUID as string

        Returns:
            Day dictionaries sorted by weekday with nested, ordered exercises
        """
        response = (
            self._client.table("plan_days")
            .select("*, plan_exercises(*)")
            .eq("plan_id", plan_id)
            .order("weekday")
            .execute()
        )
        days = []
        for row in response.data or []:
            exercises = row.pop("plan_exercises", None) or []
            row["exercises"] = sorted(exercises, key=lambda e: e.get("order", 0))
            days.append(row)
        return days

    def _rpc(self, function: str, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self._client.rpc(function, params).execute()
            if response.data is None:
                raise PlanPersistenceError(f"{function} returned no data")
            data = response.data
            if isinstance(data, list):
                if not data:
                    raise PlanPersistenceError(f"{function} returned no data")
                data = data[0]
            return data
        except PlanPersistenceError:
            raise
        except Exception as e:
            logger.exception(f"RPC {function} failed")
            raise PlanPersistenceError(f"{function} failed: {e}") from e

    def create_plan_atomic(
        self,
        user_id: str,
        *,
        name: str,
        days: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """
        Create a plan with all days and exercises atomically.

        Uses a PostgreSQL stored procedure that deactivates the user's other
        plans, computes the next plan_version and inserts every row in a
        single transaction.

        Raises:
            PlanPersistenceError: If the RPC call fails
        """
        return self._rpc("create_plan_with_days", {
            "p_user_id": user_id,
            "p_name": name,
            "p_days": days,
        })

    def replace_days_atomic(
        self,
        plan_id: str,
        *,
        days: List[Dict[str, Any]],
        name: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self._rpc("replace_plan_days", {
            "p_plan_id": plan_id,
            "p_name": name,
            "p_days": days,
        })

    def set_active(self, user_id: str, plan_id: str) -> Dict[str, Any]:
        return self._rpc("set_active_plan", {
            "p_user_id": user_id,
            "p_plan_id": plan_id,
        })

    def delete(self, plan_id: str) -> bool:
        """
        Delete a plan. Days and exercises are removed by ON DELETE CASCADE.
        """
        response = (
            self._client.table("plans")
            .delete()
            .eq("id", plan_id)
            .execute()
        )
        return bool(response.data)
