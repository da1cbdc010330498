"""
Training calculations.

Pure functions shared by the progression, suggestion and streak services:
- Estimated 1RM (Epley)
- Set volume
- Two-session progression heuristic
- Top-set selection
- Calendar helpers (Sunday-based weekday, week starts)
"""
from typing import Iterable, List, Mapping, Any, Optional, Sequence
from datetime import date, datetime, timedelta
import math

from domain.models.suggestion import (
    Suggestion,
    IncreaseSuggestion,
    DecreaseSuggestion,
    MaintainSuggestion,
)

DEFAULT_TARGET_REPS = 8

# Absolute weight delta under which two sessions count as "same weight"
WEIGHT_STABLE_DELTA = 5
# Above this weight the increment doubles
LARGE_INCREMENT_THRESHOLD = 100
SMALL_INCREMENT = 2.5
LARGE_INCREMENT = 5
DELOAD_FRACTION = 0.10
REP_SHORTFALL = 2


# =============================================================================
# Strength Formulas
# =============================================================================


def calculate_e1rm(weight: float, reps: int) -> float:
    """
    Estimate a one-rep max using the Epley formula.

    Formula: 1RM = weight * (1 + reps/30)

    Args:
        weight: Weight lifted
        reps: Reps completed (>= 1)

    Returns:
        Estimated 1RM rounded to 1 decimal place. A single is returned as-is.
    """
    if reps == 1:
        return weight
    return round(weight * (1 + reps / 30), 1)


def calculate_volume(sets: Iterable[Mapping[str, Any]]) -> float:
    """
    Sum weight x reps over a collection of sets.

    Accepts either ``reps`` or ``reps_actual`` as the rep key so that stored
    session sets can be passed directly.
    """
    total = 0
    for s in sets:
        reps = s.get("reps_actual", s.get("reps", 0)) or 0
        total += (s.get("weight") or 0) * reps
    return total


def select_top_set(sets: Sequence[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    """
    Get the heaviest set. Ties go to the first set encountered.

    Returns:
        The top set, or None for an empty sequence
    """
    top = None
    for s in sets:
        if top is None or (s.get("weight") or 0) > (top.get("weight") or 0):
            top = s
    return top


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_amount(amount: float) -> str:
    """Render a weight without a trailing .0 (2.5 -> "2.5", 5.0 -> "5")."""
    return f"{amount:g}"


# =============================================================================
# Progression Heuristic
# =============================================================================


def get_progression_suggestion(
    recent_weights: List[float],
    recent_reps: List[int],
    target_reps: int = DEFAULT_TARGET_REPS,
    weight_unit: str = "kg",
) -> Suggestion:
    """
    Suggest the next working weight from the two most recent performances.

    Inputs are most-recent-first. Boundaries are strict as written: a
    5-unit weight change is not "stable" and a shortfall of exactly two
    reps does not trigger a deload.

    Args:
        recent_weights: Top-set weights, most recent first
        recent_reps: Top-set reps, most recent first
        target_reps: Rep target for the working sets
        weight_unit: Unit label used in the reason text

    Returns:
        Increase, Decrease or Maintain suggestion
    """
    if len(recent_weights) < 2 or len(recent_reps) < 2:
        return MaintainSuggestion(reason="Keep training! Need more data for suggestions.")

    w0, w1 = recent_weights[0], recent_weights[1]
    r0, r1 = recent_reps[0], recent_reps[1]

    weight_stable = abs(w0 - w1) < WEIGHT_STABLE_DELTA
    hitting_reps = r0 >= target_reps and r1 >= target_reps

    if weight_stable and hitting_reps:
        increment = LARGE_INCREMENT if w0 > LARGE_INCREMENT_THRESHOLD else SMALL_INCREMENT
        return IncreaseSuggestion(
            amount=increment,
            reason=f"Consistent performance! Try adding {format_amount(increment)} {weight_unit}.",
        )

    if r0 < target_reps - REP_SHORTFALL and r1 < target_reps - REP_SHORTFALL:
        return DecreaseSuggestion(
            amount=_round_half_up(w0 * DELOAD_FRACTION),
            reason="Consider a 10% deload to work on form and reps.",
        )

    return MaintainSuggestion(reason="Keep working at this weight. Progress takes time!")


# =============================================================================
# Calendar Helpers
# =============================================================================


def calendar_weekday(d: date) -> int:
    """Weekday with 0=Sunday .. 6=Saturday."""
    return (d.weekday() + 1) % 7


def week_start_monday(d: date) -> date:
    """Most recent Monday on or before ``d`` (a Sunday maps six days back)."""
    return d - timedelta(days=d.weekday())


def week_start_sunday(d: date) -> date:
    """Most recent Sunday on or before ``d``."""
    return d - timedelta(days=calendar_weekday(d))


def parse_date(value: Any) -> date:
    """Parse an ISO date (or the date part of an ISO datetime)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])
