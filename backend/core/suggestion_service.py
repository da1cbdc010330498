"""
Suggestion Service.

Turns the two most recent sessions containing an exercise into a
progression suggestion, for a single exercise (with a readable reason) or
for many exercises at once (with a suggested next weight).
"""
from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field
from collections import defaultdict
import logging

from application.ports.session_repository import SessionRepository
from application.ports.exercise_repository import ExerciseRepository
from application.ports.user_repository import UserRepository
from backend.core.calculations import (
    DEFAULT_TARGET_REPS,
    format_amount,
    get_progression_suggestion,
    select_top_set,
)
from domain.models.suggestion import (
    Suggestion,
    IncreaseSuggestion,
    DecreaseSuggestion,
    UnknownSuggestion,
)

logger = logging.getLogger(__name__)

SINGLE_SCAN_SESSIONS = 20
SINGLE_MAX_MATCHES = 4
BATCH_SCAN_SESSIONS = 30
LAST_WEIGHT_SCAN_SESSIONS = 20

NOT_ENOUGH_DATA = "Not enough data yet. Keep logging workouts!"


@dataclass
class ExerciseSuggestionResponse:
    """Suggestion for a single exercise with a readable reason."""
    exercise_id: str
    suggestion: Suggestion
    reason: str
    last_weight: Optional[float] = None
    recent_sessions: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def amount(self) -> Optional[float]:
        if isinstance(self.suggestion, (IncreaseSuggestion, DecreaseSuggestion)):
            return self.suggestion.amount
        return None


@dataclass
class BatchSuggestion:
    """Suggestion for one exercise in a batch request."""
    suggestion: Suggestion
    suggested_weight: Optional[float] = None
    last_weight: Optional[float] = None


def _recent_matches(
    sessions: List[Dict[str, Any]],
    sets_by_session: Dict[str, List[Dict[str, Any]]],
    limit: int,
) -> List[Dict[str, Any]]:
    """
    Newest-first sessions that contain sets, with their sets attached.

    The top set is picked from the sets in logged order, the same order
    history uses, so ties resolve to the same set everywhere.
    """
    matches = []
    for session in sessions:
        sets = sets_by_session.get(session["id"])
        if sets:
            matches.append({
                "date": session["date"],
                "session_id": session["id"],
                "top_set": select_top_set(sets),
                "sets": sorted(sets, key=lambda s: s["set_index"]),
            })
        if len(matches) >= limit:
            break
    return matches


def _classify(
    matches: List[Dict[str, Any]],
    weight_unit: str,
    target_reps: int,
) -> Suggestion:
    if len(matches) < 2:
        return UnknownSuggestion(reason=NOT_ENOUGH_DATA)
    latest = matches[0]["top_set"]
    previous = matches[1]["top_set"]
    return get_progression_suggestion(
        [latest["weight"], previous["weight"]],
        [latest["reps_actual"], previous["reps_actual"]],
        target_reps=target_reps,
        weight_unit=weight_unit,
    )


class SuggestionService:
    """
    Service for per-exercise progression suggestions.

    The single and batch forms apply the same heuristic to the same top
    sets, so they always agree on the classification.
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        exercise_repo: ExerciseRepository,
        user_repo: UserRepository,
        *,
        target_reps: int = DEFAULT_TARGET_REPS,
    ):
        self._session_repo = session_repo
        self._exercise_repo = exercise_repo
        self._user_repo = user_repo
        self._target_reps = target_reps

    def _weight_unit(self, user_id: str) -> str:
        user = self._user_repo.get(user_id)
        return (user or {}).get("units") or "lb"

    def _sets_by_session(
        self,
        sessions: List[Dict[str, Any]],
        exercise_ids: List[str],
    ) -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
        """exercise_id -> session_id -> sets"""
        grouped: Dict[str, Dict[str, List[Dict[str, Any]]]] = defaultdict(lambda: defaultdict(list))
        if not sessions or not exercise_ids:
            return grouped
        for s in self._session_repo.get_sets(
            [session["id"] for session in sessions],
            exercise_ids=exercise_ids,
        ):
            grouped[s["exercise_id"]][s["session_id"]].append(s)
        return grouped

    def get_exercise_suggestions(self, user_id: str, exercise_id: str) -> ExerciseSuggestionResponse:
        """
        Suggest the next step for one exercise.

        Scans the 20 most recent sessions for up to 4 containing the
        exercise and classifies the two newest.

        Args:
            user_id: User ID
            exercise_id: Exercise ID

        Returns:
            ExerciseSuggestionResponse. With fewer than two matching
            sessions the suggestion is UnknownSuggestion.
        """
        sessions = self._session_repo.list_by_user(user_id, limit=SINGLE_SCAN_SESSIONS)
        grouped = self._sets_by_session(sessions, [exercise_id])
        matches = _recent_matches(sessions, grouped.get(exercise_id, {}), SINGLE_MAX_MATCHES)

        unit = self._weight_unit(user_id)
        suggestion = _classify(matches, unit, self._target_reps)
        if isinstance(suggestion, UnknownSuggestion):
            return ExerciseSuggestionResponse(
                exercise_id=exercise_id,
                suggestion=suggestion,
                reason=NOT_ENOUGH_DATA,
                recent_sessions=matches,
            )

        exercise = self._exercise_repo.get_by_id(exercise_id)
        name = exercise["name"] if exercise else "This exercise"
        last_weight = matches[0]["top_set"]["weight"]
        weight = f"{format_amount(last_weight)} {unit}"

        if isinstance(suggestion, IncreaseSuggestion):
            reason = (
                f"You've been consistent at {weight} for {name}. "
                f"Try adding {format_amount(suggestion.amount)} {unit} next session!"
            )
        elif isinstance(suggestion, DecreaseSuggestion):
            target = format_amount(suggestion.apply(last_weight))
            reason = (
                f"You've been struggling with reps on {name}. "
                f"Consider dropping to {target} {unit} and building back up."
            )
        else:
            reason = f"Keep working at {weight} for {name}. You're making progress!"

        return ExerciseSuggestionResponse(
            exercise_id=exercise_id,
            suggestion=suggestion,
            reason=reason,
            last_weight=last_weight,
            recent_sessions=matches,
        )

    def get_batch_exercise_suggestions(
        self,
        user_id: str,
        exercise_ids: List[str],
    ) -> Dict[str, BatchSuggestion]:
        """
        Suggest the next weight for several exercises.

        Reads one shared pool of the 30 most recent sessions.

        Returns:
            Dict mapping each requested exercise ID to a BatchSuggestion
        """
        exercise_ids = list(dict.fromkeys(exercise_ids))
        sessions = self._session_repo.list_by_user(user_id, limit=BATCH_SCAN_SESSIONS)
        grouped = self._sets_by_session(sessions, exercise_ids)
        unit = self._weight_unit(user_id)

        results: Dict[str, BatchSuggestion] = {}
        for exercise_id in exercise_ids:
            matches = _recent_matches(sessions, grouped.get(exercise_id, {}), SINGLE_MAX_MATCHES)
            suggestion = _classify(matches, unit, self._target_reps)
            if isinstance(suggestion, UnknownSuggestion):
                results[exercise_id] = BatchSuggestion(suggestion=suggestion)
                continue

            last_weight = matches[0]["top_set"]["weight"]
            suggested = None
            if isinstance(suggestion, (IncreaseSuggestion, DecreaseSuggestion)):
                suggested = suggestion.apply(last_weight)
            results[exercise_id] = BatchSuggestion(
                suggestion=suggestion,
                suggested_weight=suggested,
                last_weight=last_weight,
            )

        logger.info(f"Computed {len(results)} batch suggestions for user {user_id}")
        return results

    def get_last_weights(
        self,
        user_id: str,
        exercise_ids: List[str],
    ) -> Dict[str, Dict[str, Any]]:
        """
        Get per-set weights from the most recent completed session of each
        exercise, for pre-filling the logging form.

        Returns:
            Dict mapping exercise ID to {"date", "session_id", "sets": [{set_index, weight, reps_actual}]}.
            Exercises without completed history are absent.
        """
        exercise_ids = list(dict.fromkeys(exercise_ids))
        sessions = self._session_repo.list_by_user(
            user_id,
            limit=LAST_WEIGHT_SCAN_SESSIONS,
            completed_only=True,
        )
        grouped = self._sets_by_session(sessions, exercise_ids)

        results: Dict[str, Dict[str, Any]] = {}
        for exercise_id in exercise_ids:
            matches = _recent_matches(sessions, grouped.get(exercise_id, {}), 1)
            if not matches:
                continue
            latest = matches[0]
            results[exercise_id] = {
                "date": latest["date"],
                "session_id": latest["session_id"],
                "sets": [
                    {
                        "set_index": s["set_index"],
                        "weight": s["weight"],
                        "reps_actual": s["reps_actual"],
                    }
                    for s in latest["sets"]
                ],
            }
        return results
