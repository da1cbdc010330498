"""
Progression Service for Exercise Tracking.

This module provides read-side analytics computed on demand from logged
sessions and sets:
- Per-exercise history with top set, volume and estimated 1RM
- Per-exercise summary statistics for the dashboard
- Monday-start weekly training summaries
"""
from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field
from collections import defaultdict
from datetime import date, timedelta
import logging

from application.exceptions import NotFoundError
from application.ports.session_repository import SessionRepository
from application.ports.exercise_repository import ExerciseRepository
from backend.core.calculations import (
    calculate_e1rm,
    calculate_volume,
    select_top_set,
    week_start_monday,
)

logger = logging.getLogger(__name__)

RECENT_PR_DAYS = 7


# =============================================================================
# Response DTOs
# =============================================================================


@dataclass
class HistoryPoint:
    """One session's performance on an exercise."""
    date: str
    session_id: str
    top_set_weight: float
    top_set_reps: int
    total_volume: float
    estimated_1rm: float
    set_count: int
    sets: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class ExerciseHistoryResponse:
    """Response for exercise history endpoint."""
    exercise_id: str
    exercise_name: str
    days: int
    history: List[HistoryPoint]


@dataclass
class ExerciseStats:
    """Dashboard statistics for one exercise."""
    exercise_id: str
    exercise_name: str
    muscle_group: Optional[str]
    last_weight: float
    last_date: str
    session_count: int
    total_volume: float
    best_weight: float
    best_weight_date: str
    oldest_weight: float
    recent_pr: bool


@dataclass
class WeeklySummary:
    """Training totals for one Monday-start week."""
    week_start: str
    session_count: int
    completed_sessions: int
    total_volume: float
    unique_exercises: int


def _is_visible(exercise: Dict[str, Any], user_id: str) -> bool:
    return bool(exercise.get("is_global")) or exercise.get("user_id") == user_id


# =============================================================================
# Progression Service
# =============================================================================


class ProgressionService:
    """
    Service for exercise progression analytics.

    All results are projections over the user's session history; nothing
    here writes to the store.
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        exercise_repo: ExerciseRepository,
    ):
        """
        Initialize the progression service.

        Args:
            session_repo: Repository for sessions and sets
            exercise_repo: Repository for exercise metadata
        """
        self._session_repo = session_repo
        self._exercise_repo = exercise_repo

    def get_exercise_history(
        self,
        user_id: str,
        exercise_id: str,
        *,
        days: int = 90,
        today: Optional[date] = None,
    ) -> ExerciseHistoryResponse:
        """
        Get an exercise's per-session history over a lookback window.

        Sessions without a set of the exercise are omitted, so the series
        is sparse.

        Args:
            user_id: User ID
            exercise_id: Exercise ID
            days: Lookback window in days
            today: Reference date (defaults to the current date)

        Returns:
            ExerciseHistoryResponse with points sorted by date ascending

        Raises:
            NotFoundError: If the exercise does not exist or is another
                user's custom exercise
        """
        exercise = self._exercise_repo.get_by_id(exercise_id)
        if not exercise or not _is_visible(exercise, user_id):
            logger.warning(f"Exercise not found: {exercise_id}")
            raise NotFoundError("Exercise", exercise_id)

        today = today or date.today()
        since = (today - timedelta(days=days)).isoformat()
        sessions = self._session_repo.list_by_user(user_id, since=since)
        if not sessions:
            return ExerciseHistoryResponse(exercise_id, exercise["name"], days, [])

        sets_by_session: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        for s in self._session_repo.get_sets(
            [session["id"] for session in sessions],
            exercise_ids=[exercise_id],
        ):
            sets_by_session[s["session_id"]].append(s)

        history = []
        for session in sessions:
            sets = sets_by_session.get(session["id"])
            if not sets:
                continue
            top = select_top_set(sets)
            history.append(HistoryPoint(
                date=session["date"],
                session_id=session["id"],
                top_set_weight=top["weight"],
                top_set_reps=top["reps_actual"],
                total_volume=calculate_volume(sets),
                estimated_1rm=calculate_e1rm(top["weight"], top["reps_actual"]),
                set_count=len(sets),
                sets=sorted(sets, key=lambda s: s["set_index"]),
            ))

        history.sort(key=lambda p: p.date)
        return ExerciseHistoryResponse(exercise_id, exercise["name"], days, history)

    def get_all_exercise_stats(
        self,
        user_id: str,
        *,
        today: Optional[date] = None,
    ) -> List[ExerciseStats]:
        """
        Get summary statistics for every exercise the user has logged.

        ``last_weight`` and ``oldest_weight`` are top-set weights of the most
        recent and the first session containing the exercise. ``recent_pr``
        is True when the best weight was first reached within the last
        seven days.

        Returns:
            Stats sorted by last_date descending
        """
        today = today or date.today()
        sessions = self._session_repo.list_by_user(user_id)
        if not sessions:
            return []

        session_dates = {s["id"]: s["date"] for s in sessions}
        # exercise_id -> date -> sets logged that day
        by_exercise: Dict[str, Dict[str, List[Dict[str, Any]]]] = defaultdict(lambda: defaultdict(list))
        for s in self._session_repo.get_sets(list(session_dates)):
            by_exercise[s["exercise_id"]][session_dates[s["session_id"]]].append(s)

        exercises = self._exercise_repo.get_many(list(by_exercise))
        recent_cutoff = (today - timedelta(days=RECENT_PR_DAYS)).isoformat()

        stats = []
        for exercise_id, by_date in by_exercise.items():
            dates = sorted(by_date)
            best_weight = 0.0
            best_weight_date = ""
            total_volume = 0.0
            for d in dates:
                total_volume += calculate_volume(by_date[d])
                top = select_top_set(by_date[d])
                if top["weight"] > best_weight:
                    best_weight = top["weight"]
                    best_weight_date = d

            exercise = exercises.get(exercise_id, {})
            stats.append(ExerciseStats(
                exercise_id=exercise_id,
                exercise_name=exercise.get("name", "Unknown"),
                muscle_group=exercise.get("muscle_group"),
                last_weight=select_top_set(by_date[dates[-1]])["weight"],
                last_date=dates[-1],
                session_count=len(dates),
                total_volume=total_volume,
                best_weight=best_weight,
                best_weight_date=best_weight_date,
                oldest_weight=select_top_set(by_date[dates[0]])["weight"],
                recent_pr=bool(best_weight_date) and best_weight_date >= recent_cutoff,
            ))

        stats.sort(key=lambda s: s.last_date, reverse=True)
        return stats

    def get_weekly_summary(
        self,
        user_id: str,
        *,
        weeks: int = 8,
        today: Optional[date] = None,
    ) -> List[WeeklySummary]:
        """
        Bucket recent sessions into Monday-start weeks.

        Args:
            user_id: User ID
            weeks: Lookback in weeks
            today: Reference date (defaults to the current date)

        Returns:
            One summary per week that has sessions, ascending by week_start
        """
        today = today or date.today()
        since = (today - timedelta(days=weeks * 7)).isoformat()
        sessions = self._session_repo.list_by_user(user_id, since=since)
        if not sessions:
            return []

        sets_by_session: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        for s in self._session_repo.get_sets([session["id"] for session in sessions]):
            sets_by_session[s["session_id"]].append(s)

        buckets: Dict[str, Dict[str, Any]] = {}
        for session in sessions:
            week_start = week_start_monday(date.fromisoformat(session["date"])).isoformat()
            bucket = buckets.setdefault(week_start, {
                "session_count": 0,
                "completed_sessions": 0,
                "total_volume": 0,
                "exercise_ids": set(),
            })
            bucket["session_count"] += 1
            if session.get("completed_at"):
                bucket["completed_sessions"] += 1
            sets = sets_by_session.get(session["id"], [])
            bucket["total_volume"] += calculate_volume(sets)
            bucket["exercise_ids"].update(s["exercise_id"] for s in sets)

        return [
            WeeklySummary(
                week_start=week_start,
                session_count=b["session_count"],
                completed_sessions=b["completed_sessions"],
                total_volume=b["total_volume"],
                unique_exercises=len(b["exercise_ids"]),
            )
            for week_start, b in sorted(buckets.items())
        ]
