"""
Plan-aware Streak Service.

A streak counts consecutive completed *workout days*: weekdays on which the
user's active plan schedules at least one exercise. Rest days neither extend
nor break a streak. Users without a plan (or whose plan is all rest days)
fall back to a consecutive-calendar-day streak.

This module provides:
- Pure streak functions (workout weekdays, backward walk, calendar fallback)
- StreakService: completion-time streak updates, achievement unlocking,
  and the read-only streak views
"""
from typing import Optional, List, Dict, Any, Iterable, Iterator, Set, FrozenSet
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
import logging

from application.exceptions import InvalidInputError
from application.ports.user_repository import UserRepository
from application.ports.session_repository import SessionRepository
from application.ports.plan_repository import PlanRepository
from application.ports.achievement_repository import AchievementRepository
from backend.core.calculations import calendar_weekday, week_start_sunday, parse_date
from domain.models.streak import (
    ACHIEVEMENTS_BY_TYPE,
    PlannedStreak,
    StreakStatus,
    StreakUpdate,
    crossed_thresholds,
)

logger = logging.getLogger(__name__)

MAX_LOOKBACK_DAYS = 730
DEFAULT_WEEKLY_GOAL = 3


# =============================================================================
# Pure Streak Functions
# =============================================================================


def workout_weekdays(plan_days: Iterable[Dict[str, Any]]) -> FrozenSet[int]:
    """Weekdays (0=Sunday) of plan days that have at least one exercise."""
    return frozenset(
        day["weekday"] for day in plan_days
        if day.get("exercises")
    )


def iter_workout_days(
    as_of: date,
    weekdays: FrozenSet[int],
    max_lookback_days: int = MAX_LOOKBACK_DAYS,
) -> Iterator[date]:
    """
    Yield workout days from ``as_of`` backwards, newest first.

    Stops after ``max_lookback_days`` calendar days.
    """
    for offset in range(max_lookback_days + 1):
        day = as_of - timedelta(days=offset)
        if calendar_weekday(day) in weekdays:
            yield day


def previous_workout_day(
    as_of: date,
    weekdays: FrozenSet[int],
    max_lookback_days: int = MAX_LOOKBACK_DAYS,
) -> Optional[date]:
    """Most recent workout day strictly before ``as_of``, if any."""
    for day in iter_workout_days(as_of - timedelta(days=1), weekdays, max_lookback_days):
        return day
    return None


def compute_planned_streak(
    as_of: date,
    weekdays: FrozenSet[int],
    completed_dates: Set[date],
    max_lookback_days: int = MAX_LOOKBACK_DAYS,
) -> PlannedStreak:
    """
    Count consecutive completed workout days ending at or before ``as_of``.

    An uncompleted ``as_of`` workout day is still pending and does not break
    the streak. Any other uncompleted workout day ends the walk, as does
    reaching a day earlier than the first completion.

    Args:
        as_of: Day to evaluate (a just-completed session date, or today)
        weekdays: Scheduled workout weekdays (0=Sunday)
        completed_dates: Dates with a completed session
        max_lookback_days: Walk bound in calendar days

    Returns:
        PlannedStreak with the count and flags for ``as_of``
    """
    is_workout_day = calendar_weekday(as_of) in weekdays
    completed_on_day = is_workout_day and as_of in completed_dates

    if not completed_dates or not weekdays:
        return PlannedStreak(0, is_workout_day, completed_on_day)

    earliest = min(completed_dates)
    streak = 0
    for day in iter_workout_days(as_of, weekdays, max_lookback_days):
        if day < earliest:
            break
        if day in completed_dates:
            streak += 1
        elif day == as_of:
            continue
        else:
            break

    return PlannedStreak(streak, is_workout_day, completed_on_day)


def compute_calendar_streak(
    previous_streak: int,
    last_workout_date: Optional[date],
    session_date: date,
) -> int:
    """
    Consecutive-calendar-day streak used when no plan schedules workouts.

    First workout ever -> 1, adjacent day -> +1, same day -> unchanged,
    any gap -> 1.
    """
    if last_workout_date is None:
        return 1
    gap = abs((session_date - last_workout_date).days)
    if gap == 0:
        return previous_streak
    if gap == 1:
        return previous_streak + 1
    return 1


def load_active_workout_weekdays(plan_repo: PlanRepository, user_id: str) -> FrozenSet[int]:
    """Workout weekdays of the user's active plan (empty without one)."""
    plan = plan_repo.get_active(user_id)
    if not plan:
        return frozenset()
    return workout_weekdays(plan_repo.get_days(plan["id"]))


# =============================================================================
# Response DTOs
# =============================================================================


@dataclass
class StreakDataResponse:
    current_streak: int
    longest_streak: int
    last_workout_date: Optional[str]
    weekly_goal: int
    weekly_completed: int


@dataclass
class StreakStatusResponse:
    status: StreakStatus
    streak: int


# =============================================================================
# Streak Service
# =============================================================================


class StreakService:
    """
    Service for maintaining and reporting workout streaks.

    Stored counters (current/longest streak, last workout date) are written
    only by record_completion. The read views recompute the plan-aware
    streak on demand and never write.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        session_repo: SessionRepository,
        plan_repo: PlanRepository,
        achievement_repo: AchievementRepository,
        *,
        max_lookback_days: int = MAX_LOOKBACK_DAYS,
        default_weekly_goal: int = DEFAULT_WEEKLY_GOAL,
    ):
        self._user_repo = user_repo
        self._session_repo = session_repo
        self._plan_repo = plan_repo
        self._achievement_repo = achievement_repo
        self._max_lookback_days = max_lookback_days
        self._default_weekly_goal = default_weekly_goal

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _completed_dates(self, user_id: str, as_of: date) -> Set[date]:
        since = as_of - timedelta(days=self._max_lookback_days)
        sessions = self._session_repo.list_by_user(
            user_id,
            since=since.isoformat(),
            completed_only=True,
        )
        return {parse_date(s["date"]) for s in sessions if s.get("completed_at")}

    def _unlock_achievements(
        self,
        user_id: str,
        previous_streak: int,
        new_streak: int,
    ) -> List[str]:
        unlocked = []
        now = datetime.now(timezone.utc).isoformat()
        for achievement in crossed_thresholds(previous_streak, new_streak):
            created = self._achievement_repo.unlock(
                user_id,
                achievement.type,
                unlocked_at=now,
                metadata={"streak": new_streak},
            )
            if created:
                logger.info(f"Achievement {achievement.type} unlocked for user {user_id}")
                unlocked.append(achievement.type)
        return unlocked

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def record_completion(self, user_id: str, session_date: date) -> StreakUpdate:
        """
        Update the stored streak after a session transitions to completed.

        Must be called at most once per session: SessionService only calls it
        for the caller that actually set completed_at.

        Args:
            user_id: User who completed the session
            session_date: Date of the completed session

        Returns:
            StreakUpdate with the resulting counters and newly unlocked
            achievement types
        """
        user = self._user_repo.get_or_create(user_id)
        previous_streak = user.get("current_streak") or 0
        longest_streak = user.get("longest_streak") or 0
        date_str = session_date.isoformat()

        weekdays = load_active_workout_weekdays(self._plan_repo, user_id)

        if weekdays:
            if calendar_weekday(session_date) not in weekdays:
                self._user_repo.update(user_id, {"last_workout_date": date_str})
                logger.info(f"Rest day session completed for user {user_id} on {date_str}")
                return StreakUpdate(
                    current_streak=previous_streak,
                    longest_streak=longest_streak,
                    is_workout_day=False,
                    new_achievements=[],
                    last_workout_date=date_str,
                )
            result = compute_planned_streak(
                session_date,
                weekdays,
                self._completed_dates(user_id, session_date),
                self._max_lookback_days,
            )
            new_streak = result.streak
        else:
            last_workout = user.get("last_workout_date")
            if last_workout == date_str:
                return StreakUpdate(
                    current_streak=previous_streak,
                    longest_streak=longest_streak,
                    is_workout_day=True,
                    new_achievements=[],
                    last_workout_date=last_workout,
                )
            new_streak = compute_calendar_streak(
                previous_streak,
                parse_date(last_workout) if last_workout else None,
                session_date,
            )

        new_longest = max(longest_streak, new_streak)
        self._user_repo.update(user_id, {
            "current_streak": new_streak,
            "longest_streak": new_longest,
            "last_workout_date": date_str,
        })
        logger.info(
            f"Streak updated for user {user_id}: {previous_streak} -> {new_streak}"
        )

        new_achievements = self._unlock_achievements(user_id, previous_streak, new_streak)

        return StreakUpdate(
            current_streak=new_streak,
            longest_streak=new_longest,
            is_workout_day=True,
            new_achievements=new_achievements,
            last_workout_date=date_str,
        )

    def set_weekly_goal(self, user_id: str, goal: int) -> Dict[str, Any]:
        """
        Set the number of workouts per week the user aims for.

        Raises:
            InvalidInputError: If goal is outside 1..7
        """
        if goal < 1 or goal > 7:
            raise InvalidInputError("Weekly goal must be between 1 and 7")
        self._user_repo.get_or_create(user_id)
        return self._user_repo.update(user_id, {"weekly_goal": goal})

    # -------------------------------------------------------------------------
    # Read Views
    # -------------------------------------------------------------------------

    def get_streak_data(self, user_id: str, today: Optional[date] = None) -> StreakDataResponse:
        """
        Get streak counters and weekly progress.

        The current streak is recomputed as of today when the user has an
        active plan with workout days, otherwise the stored value is used.
        """
        today = today or date.today()
        user = self._user_repo.get(user_id) or {}

        week_start = week_start_sunday(today)
        this_week = self._session_repo.list_by_user(
            user_id,
            since=week_start.isoformat(),
            completed_only=True,
        )
        weekly_completed = sum(1 for s in this_week if s.get("completed_at"))

        current_streak = user.get("current_streak") or 0
        weekdays = load_active_workout_weekdays(self._plan_repo, user_id)
        if weekdays:
            current_streak = compute_planned_streak(
                today,
                weekdays,
                self._completed_dates(user_id, today),
                self._max_lookback_days,
            ).streak

        return StreakDataResponse(
            current_streak=current_streak,
            longest_streak=user.get("longest_streak") or 0,
            last_workout_date=user.get("last_workout_date"),
            weekly_goal=user.get("weekly_goal") or self._default_weekly_goal,
            weekly_completed=weekly_completed,
        )

    def get_streak_status(self, user_id: str, today: Optional[date] = None) -> StreakStatusResponse:
        """
        Classify the streak as none, completed, at_risk or broken.

        Args:
            user_id: User ID
            today: Evaluation day (defaults to the current date)

        Returns:
            StreakStatusResponse
        """
        today = today or date.today()
        user = self._user_repo.get(user_id) or {}
        weekdays = load_active_workout_weekdays(self._plan_repo, user_id)

        if not weekdays:
            return self._calendar_status(user, today)

        completed = self._completed_dates(user_id, today)
        result = compute_planned_streak(today, weekdays, completed, self._max_lookback_days)

        if result.completed_on_day:
            return StreakStatusResponse(StreakStatus.COMPLETED, result.streak)

        if result.streak > 0:
            status = StreakStatus.AT_RISK if result.is_workout_day else StreakStatus.COMPLETED
            return StreakStatusResponse(status, result.streak)

        last_scheduled = previous_workout_day(today, weekdays, self._max_lookback_days)
        if (
            last_scheduled is not None
            and last_scheduled not in completed
            and any(d < last_scheduled for d in completed)
        ):
            return StreakStatusResponse(StreakStatus.BROKEN, 0)

        return StreakStatusResponse(StreakStatus.NONE, 0)

    def _calendar_status(self, user: Dict[str, Any], today: date) -> StreakStatusResponse:
        current_streak = user.get("current_streak") or 0
        last_workout = user.get("last_workout_date")

        if current_streak == 0:
            return StreakStatusResponse(StreakStatus.NONE, 0)
        if last_workout == today.isoformat():
            return StreakStatusResponse(StreakStatus.COMPLETED, current_streak)
        if last_workout == (today - timedelta(days=1)).isoformat():
            return StreakStatusResponse(StreakStatus.AT_RISK, current_streak)
        return StreakStatusResponse(StreakStatus.BROKEN, 0)

    def get_achievements(self, user_id: str) -> List[Dict[str, Any]]:
        """Get unlocked achievements with display labels."""
        achievements = []
        for record in self._achievement_repo.list_by_user(user_id):
            definition = ACHIEVEMENTS_BY_TYPE.get(record["type"])
            achievements.append({
                **record,
                "label": definition.label if definition else record["type"],
                "description": definition.description if definition else None,
            })
        return achievements
