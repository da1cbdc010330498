"""
Plan Service.

Weekly training plans: creation, wholesale editing of days, activation and
lookup of the template for a given date. A user has at most one active
plan; the repository enforces it atomically on create and activate.
"""
from typing import Optional, List, Dict, Any
from datetime import date
import logging

from application.exceptions import NotFoundError, InvalidInputError
from application.ports.plan_repository import PlanRepository
from application.ports.exercise_repository import ExerciseRepository
from backend.core.calculations import calendar_weekday
from domain.models.training import PlanDaySpec

logger = logging.getLogger(__name__)


class PlanService:
    """
    Service for weekly plan management.

    Validation runs before any write, so a rejected request leaves the
    user's plans untouched.
    """

    def __init__(
        self,
        plan_repo: PlanRepository,
        exercise_repo: ExerciseRepository,
    ):
        self._plan_repo = plan_repo
        self._exercise_repo = exercise_repo

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _get_owned_plan(self, user_id: str, plan_id: str) -> Dict[str, Any]:
        plan = self._plan_repo.get_by_id(plan_id)
        if not plan or plan.get("user_id") != user_id:
            logger.warning(f"Plan {plan_id} not found for user {user_id}")
            raise NotFoundError("Plan", plan_id)
        return plan

    def _validate_days(self, user_id: str, days: List[PlanDaySpec]) -> List[Dict[str, Any]]:
        seen = set()
        exercise_ids = set()
        for day in days:
            if day.weekday < 0 or day.weekday > 6:
                raise InvalidInputError(f"Weekday must be between 0 and 6, got {day.weekday}")
            if day.weekday in seen:
                raise InvalidInputError(f"Weekday {day.weekday} appears more than once")
            seen.add(day.weekday)
            exercise_ids.update(e.exercise_id for e in day.exercises)

        if exercise_ids:
            found = self._exercise_repo.get_many(sorted(exercise_ids))
            for exercise_id in sorted(exercise_ids):
                exercise = found.get(exercise_id)
                if not exercise or not (
                    exercise.get("is_global") or exercise.get("user_id") == user_id
                ):
                    raise InvalidInputError(f"Unknown exercise: {exercise_id}")

        return [day.model_dump() for day in days]

    def _with_days(self, plan: Dict[str, Any]) -> Dict[str, Any]:
        days = self._plan_repo.get_days(plan["id"])
        exercise_ids = list({e["exercise_id"] for d in days for e in d.get("exercises", [])})
        exercises = self._exercise_repo.get_many(exercise_ids) if exercise_ids else {}
        return {
            **plan,
            "days": [
                {
                    **day,
                    "exercises": [
                        {**e, "exercise": exercises.get(e["exercise_id"])}
                        for e in day.get("exercises", [])
                    ],
                }
                for day in days
            ],
        }

    @staticmethod
    def _validate_name(name: Optional[str]) -> None:
        if name is not None and not name.strip():
            raise InvalidInputError("Plan name must not be empty")

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create_plan(self, user_id: str, name: str, days: List[PlanDaySpec]) -> Dict[str, Any]:
        """
        Create a plan and make it the user's active plan.

        Args:
            user_id: Owner
            name: Plan name
            days: Weekday definitions (0=Sunday)

        Returns:
            Created plan with its days

        Raises:
            InvalidInputError: On empty name, bad weekday or unknown exercise
            PlanPersistenceError: If the store rejects the atomic write
        """
        self._validate_name(name)
        day_rows = self._validate_days(user_id, days)
        plan = self._plan_repo.create_plan_atomic(user_id, name=name.strip(), days=day_rows)
        logger.info(
            f"Created plan {plan['id']} (v{plan.get('plan_version')}) for user {user_id}"
        )
        return self._with_days(plan)

    def update_plan_days(
        self,
        user_id: str,
        plan_id: str,
        days: List[PlanDaySpec],
        name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Replace a plan's days and exercises wholesale.

        Raises:
            NotFoundError: If the plan is not the user's
            InvalidInputError: On bad input
        """
        self._get_owned_plan(user_id, plan_id)
        self._validate_name(name)
        day_rows = self._validate_days(user_id, days)
        plan = self._plan_repo.replace_days_atomic(
            plan_id,
            days=day_rows,
            name=name.strip() if name else None,
        )
        logger.info(f"Replaced days of plan {plan_id}")
        return self._with_days(plan)

    def set_active_plan(self, user_id: str, plan_id: str) -> Dict[str, Any]:
        """
        Make a plan the user's only active plan.

        Raises:
            NotFoundError: If the plan is not the user's
        """
        self._get_owned_plan(user_id, plan_id)
        plan = self._plan_repo.set_active(user_id, plan_id)
        logger.info(f"Activated plan {plan_id} for user {user_id}")
        return plan

    def delete_plan(self, user_id: str, plan_id: str) -> None:
        self._get_owned_plan(user_id, plan_id)
        self._plan_repo.delete(plan_id)
        logger.info(f"Deleted plan {plan_id}")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_plans(self, user_id: str) -> List[Dict[str, Any]]:
        return self._plan_repo.list_by_user(user_id)

    def get_plan(self, user_id: str, plan_id: str) -> Dict[str, Any]:
        """Get a plan with days and exercise details."""
        return self._with_days(self._get_owned_plan(user_id, plan_id))

    def get_active_plan(self, user_id: str) -> Optional[Dict[str, Any]]:
        plan = self._plan_repo.get_active(user_id)
        return self._with_days(plan) if plan else None

    def get_today_template(self, user_id: str, day: date) -> Optional[Dict[str, Any]]:
        """
        Get the active plan's template for a date.

        Returns:
            {"plan", "day", "exercises"} where day is None (and exercises
            empty) when the plan has nothing on that weekday, or None when
            the user has no active plan
        """
        plan = self._plan_repo.get_active(user_id)
        if not plan:
            return None

        weekday = calendar_weekday(day)
        full = self._with_days(plan)
        plan_day = next((d for d in full["days"] if d["weekday"] == weekday), None)
        if plan_day is None:
            return {"plan": plan, "day": None, "exercises": []}

        exercises = sorted(plan_day["exercises"], key=lambda e: e.get("order", 0))
        day_info = {k: v for k, v in plan_day.items() if k != "exercises"}
        return {"plan": plan, "day": day_info, "exercises": exercises}
