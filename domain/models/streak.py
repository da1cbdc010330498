"""
Streak and achievement value objects.

Streaks count consecutive completed *workout days*. Achievements are
unlocked when the current streak first crosses one of the thresholds in
STREAK_ACHIEVEMENTS.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class StreakStatus(str, Enum):
    """Read-only classification of a user's streak as of a given day."""

    NONE = "none"
    COMPLETED = "completed"
    AT_RISK = "at_risk"
    BROKEN = "broken"


@dataclass(frozen=True)
class AchievementDefinition:
    threshold: int
    label: str
    description: str

    @property
    def type(self) -> str:
        return f"streak_{self.threshold}"


STREAK_ACHIEVEMENTS: List[AchievementDefinition] = [
    AchievementDefinition(3, "3-Day Streak", "Completed 3 scheduled workouts in a row"),
    AchievementDefinition(7, "Week Warrior", "Completed 7 scheduled workouts in a row"),
    AchievementDefinition(14, "Two Week Titan", "Completed 14 scheduled workouts in a row"),
    AchievementDefinition(30, "Monthly Master", "Completed 30 scheduled workouts in a row"),
    AchievementDefinition(60, "Iron Will", "Completed 60 scheduled workouts in a row"),
    AchievementDefinition(100, "Century Club", "Completed 100 scheduled workouts in a row"),
]

ACHIEVEMENTS_BY_TYPE: Dict[str, AchievementDefinition] = {a.type: a for a in STREAK_ACHIEVEMENTS}


def crossed_thresholds(previous_streak: int, new_streak: int) -> List[AchievementDefinition]:
    """
    Get the achievements whose threshold lies in (previous_streak, new_streak].

    Args:
        previous_streak: Streak stored before the completion
        new_streak: Streak after the completion

    Returns:
        Definitions in ascending threshold order
    """
    return [
        a for a in STREAK_ACHIEVEMENTS
        if new_streak >= a.threshold and previous_streak < a.threshold
    ]


@dataclass(frozen=True)
class PlannedStreak:
    """Result of a plan-aware streak walk."""

    streak: int
    is_workout_day: bool
    completed_on_day: bool


@dataclass
class StreakUpdate:
    """Outcome of recording a session completion against the user's streak."""

    current_streak: int
    longest_streak: int
    is_workout_day: bool
    new_achievements: List[str]
    last_workout_date: Optional[str] = None
