"""
Session Repository Interface (Port).

This module defines the abstract interface for logged workout sessions and
their sets. Sessions are keyed by (user, date) and sets are keyed by
(session, exercise, set_index); both keys are unique in the store.
"""
from typing import Protocol, Optional, List, Dict, Any


class SessionRepository(Protocol):
    """
    Abstract interface for session and set persistence.

    Dates are ISO strings (YYYY-MM-DD); timestamps are ISO datetimes.
    """

    def get_by_id(self, session_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a session by ID.

        Returns:
            Session dictionary or None if not found
        """
        ...

    def get_by_date(self, user_id: str, session_date: str) -> Optional[Dict[str, Any]]:
        """
        Get a user's session for a calendar date.

        Returns:
            Session dictionary or None if nothing was logged that day
        """
        ...

    def get_or_create(
        self,
        user_id: str,
        session_date: str,
        *,
        weekday: int,
        plan_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get the session for (user, date), creating it if it does not exist.

        Concurrent calls for the same key return the same record.

        Args:
            user_id: Owner
            session_date: ISO date
            weekday: 0=Sunday .. 6=Saturday, computed from the date
            plan_id: Plan active when the session was started

        Returns:
            Session dictionary
        """
        ...

    def list_by_user(
        self,
        user_id: str,
        *,
        since: Optional[str] = None,
        limit: Optional[int] = None,
        completed_only: bool = False,
    ) -> List[Dict[str, Any]]:
        """
        List a user's sessions ordered by date descending.

        Args:
            user_id: Owner
            since: Only sessions with date >= since (ISO date)
            limit: Maximum sessions to return
            completed_only: Only sessions with completed_at set

        Returns:
            List of session dictionaries
        """
        ...

    def mark_completed(
        self,
        session_id: str,
        *,
        completed_at: str,
        notes: Optional[str] = None,
    ) -> bool:
        """
        Set completed_at if, and only if, it is not already set.

        The check and the write happen in a single conditional update so
        that exactly one of several concurrent callers observes True.

        Returns:
            True if this call transitioned the session to completed
        """
        ...

    def update_notes(self, session_id: str, notes: Optional[str]) -> None:
        """Overwrite a session's notes."""
        ...

    def get_sets(
        self,
        session_ids: List[str],
        *,
        exercise_ids: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get the sets logged in the given sessions.

        Args:
            session_ids: Sessions to read
            exercise_ids: Only sets for these exercises, or None for all

        Returns:
            Set dictionaries in insertion order
        """
        ...

    def upsert_set(
        self,
        session_id: str,
        exercise_id: str,
        set_index: int,
        *,
        reps_actual: int,
        weight: float,
        rpe: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Insert a set, or overwrite the existing set with the same
        (session_id, exercise_id, set_index).

        Returns:
            The stored set dictionary
        """
        ...
