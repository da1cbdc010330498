"""
Plan Repository Interface (Port).

This module defines the abstract interface for weekly training plans.
A plan owns its plan days, and each plan day owns its plan exercises.
Days and exercises are always written together with their plan and
replaced wholesale on edit.

Invariant: a user has at most one active plan. Every operation that
activates a plan deactivates the user's other plans in the same step.
"""
from typing import Protocol, Optional, List, Dict, Any


class PlanRepository(Protocol):
    """
    Abstract interface for plan persistence.

    Day dictionaries passed to the write methods look like:

        {
            "weekday": 1,              # 0=Sunday .. 6=Saturday
            "name": "Push Day",
            "exercises": [
                {
                    "exercise_id": "...",
                    "order": 0,
                    "sets": [{"reps_target": 8, "notes": None}],
                    "rest_seconds": 90,
                },
            ],
        }
    """

    def list_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Get all plans for a user, newest first.

        Args:
            user_id: User ID

        Returns:
            List of plan dictionaries (without days)
        """
        ...

    def get_by_id(self, plan_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a plan by ID.

        Args:
            plan_id: Plan ID

        Returns:
            Plan dictionary (without days) or None if not found
        """
        ...

    def get_active(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Get the user's active plan.

        Args:
            user_id: User ID

        Returns:
            Plan dictionary or None if no plan is active
        """
        ...

    def get_days(self, plan_id: str) -> List[Dict[str, Any]]:
        """
        Get a plan's days with their exercises.

        Args:
            plan_id: Plan ID

        Returns:
            Day dictionaries sorted by weekday, each with an "exercises"
            list sorted by order
        """
        ...

    def create_plan_atomic(
        self,
        user_id: str,
        *,
        name: str,
        days: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """
        Create an active plan with all days and exercises atomically.

        Deactivates every other plan of the user and assigns
        plan_version = previous max + 1 in the same transaction.

        Args:
            user_id: Owner
            name: Plan name
            days: Day dictionaries (see class docstring)

        Returns:
            Created plan dictionary

        Raises:
            PlanPersistenceError: If the atomic creation fails
        """
        ...

    def replace_days_atomic(
        self,
        plan_id: str,
        *,
        days: List[Dict[str, Any]],
        name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Delete a plan's days and exercises and recreate them from `days`.

        Args:
            plan_id: Plan ID
            days: Replacement day dictionaries
            name: Optional new plan name

        Returns:
            Updated plan dictionary

        Raises:
            PlanPersistenceError: If the replacement fails
        """
        ...

    def set_active(self, user_id: str, plan_id: str) -> Dict[str, Any]:
        """
        Activate a plan and deactivate all other plans of the user atomically.

        Args:
            user_id: Owner
            plan_id: Plan to activate

        Returns:
            Activated plan dictionary

        Raises:
            PlanPersistenceError: If the activation fails
        """
        ...

    def delete(self, plan_id: str) -> bool:
        """
        Delete a plan with its days and exercises.

        Args:
            plan_id: Plan ID

        Returns:
            True if deleted, False if not found
        """
        ...
