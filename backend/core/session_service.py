"""
Session Service.

Logging workflow for a training day:
1. get_or_create_session: one session per (user, date)
2. log_set: upsert a set keyed by (session, exercise, set_index)
3. complete_session: mark completed once and update the streak
"""
from typing import Optional, List, Dict, Any
from dataclasses import dataclass
from datetime import date, datetime, timezone
import logging

from application.exceptions import NotFoundError, InvalidInputError
from application.ports.session_repository import SessionRepository
from application.ports.plan_repository import PlanRepository
from application.ports.exercise_repository import ExerciseRepository
from backend.core.calculations import calendar_weekday, parse_date
from backend.core.streak_service import StreakService
from domain.models.streak import StreakUpdate

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    """Result of completing a session."""
    session_id: str
    newly_completed: bool
    streak_result: Optional[StreakUpdate] = None


class SessionService:
    """
    Service for session logging and completion.

    Every operation checks that the session (or plan) belongs to the
    calling user. Records owned by someone else are reported as not found.
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        plan_repo: PlanRepository,
        exercise_repo: ExerciseRepository,
        streak_service: StreakService,
    ):
        self._session_repo = session_repo
        self._plan_repo = plan_repo
        self._exercise_repo = exercise_repo
        self._streak_service = streak_service

    def _get_owned_session(self, user_id: str, session_id: str) -> Dict[str, Any]:
        session = self._session_repo.get_by_id(session_id)
        if not session or session.get("user_id") != user_id:
            logger.warning(f"Session {session_id} not found for user {user_id}")
            raise NotFoundError("Session", session_id)
        return session

    def _require_visible_exercise(self, user_id: str, exercise_id: str) -> None:
        exercise = self._exercise_repo.get_by_id(exercise_id)
        if not exercise or not (exercise.get("is_global") or exercise.get("user_id") == user_id):
            logger.warning(f"Exercise {exercise_id} not found for user {user_id}")
            raise NotFoundError("Exercise", exercise_id)

    def get_or_create_session(
        self,
        user_id: str,
        session_date: date,
        plan_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get the user's session for a date, creating it on first use.

        Args:
            user_id: User ID
            session_date: Training day
            plan_id: Plan the session follows (must belong to the user)

        Returns:
            Session dictionary

        Raises:
            NotFoundError: If plan_id is not one of the user's plans
        """
        if plan_id is not None:
            plan = self._plan_repo.get_by_id(plan_id)
            if not plan or plan.get("user_id") != user_id:
                logger.warning(f"Plan {plan_id} not found for user {user_id}")
                raise NotFoundError("Plan", plan_id)

        return self._session_repo.get_or_create(
            user_id,
            session_date.isoformat(),
            weekday=calendar_weekday(session_date),
            plan_id=plan_id,
        )

    def log_set(
        self,
        user_id: str,
        session_id: str,
        exercise_id: str,
        set_index: int,
        reps_actual: int,
        weight: float,
        rpe: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Record a set, overwriting any set already logged at the same index.

        Raises:
            NotFoundError: If the session is not the user's, or the exercise
                is neither global nor the user's own
            InvalidInputError: If the numbers are out of range
        """
        self._get_owned_session(user_id, session_id)
        self._require_visible_exercise(user_id, exercise_id)
        if set_index < 0:
            raise InvalidInputError("set_index must be >= 0")
        if reps_actual < 0 or weight < 0:
            raise InvalidInputError("reps_actual and weight must be >= 0")

        return self._session_repo.upsert_set(
            session_id,
            exercise_id,
            set_index,
            reps_actual=reps_actual,
            weight=weight,
            rpe=rpe,
        )

    def complete_session(
        self,
        user_id: str,
        session_id: str,
        notes: Optional[str] = None,
    ) -> CompletionResult:
        """
        Mark a session completed and update the user's streak.

        Only the call that sets completed_at updates the streak. Completing
        an already-completed session just overwrites its notes.

        Raises:
            NotFoundError: If the session is not the user's
        """
        session = self._get_owned_session(user_id, session_id)
        now = datetime.now(timezone.utc).isoformat()

        transitioned = self._session_repo.mark_completed(
            session_id,
            completed_at=now,
            notes=notes,
        )
        if not transitioned:
            self._session_repo.update_notes(session_id, notes)
            logger.info(f"Session {session_id} already completed; notes updated")
            return CompletionResult(session_id=session_id, newly_completed=False)

        logger.info(f"Session {session_id} completed by user {user_id}")
        streak_result = self._streak_service.record_completion(
            user_id,
            parse_date(session["date"]),
        )
        return CompletionResult(
            session_id=session_id,
            newly_completed=True,
            streak_result=streak_result,
        )

    def get_session_by_date(self, user_id: str, session_date: date) -> Optional[Dict[str, Any]]:
        """
        Get a session with its sets, each set carrying its exercise record.

        Returns:
            Session dictionary with a "sets" list, or None
        """
        session = self._session_repo.get_by_date(user_id, session_date.isoformat())
        if not session:
            return None

        sets = self._session_repo.get_sets([session["id"]])
        exercises = self._exercise_repo.get_many(list({s["exercise_id"] for s in sets}))
        return {
            **session,
            "sets": [
                {**s, "exercise": exercises.get(s["exercise_id"])}
                for s in sorted(sets, key=lambda s: (s["exercise_id"], s["set_index"]))
            ],
        }

    def get_recent_sessions(self, user_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        return self._session_repo.list_by_user(user_id, limit=limit)
