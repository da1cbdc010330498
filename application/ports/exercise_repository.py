"""
Exercise Repository Interface (Port).

This module defines the abstract interface for the exercise catalog.
The catalog holds global exercises shared by every user and custom
exercises owned by exactly one user.
"""
from typing import Protocol, Optional, List, Dict, Any, Set


class ExerciseRepository(Protocol):
    """
    Abstract interface for querying and extending the exercise catalog.
    """

    def get_by_id(self, exercise_id: str) -> Optional[Dict[str, Any]]:
        """
        Get an exercise by ID.

        Args:
            exercise_id: Exercise ID

        Returns:
            Exercise dictionary or None if not found
        """
        ...

    def get_many(self, exercise_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        """
        Get several exercises at once.

        Args:
            exercise_ids: Exercise IDs to look up

        Returns:
            Dict mapping exercise ID to exercise dictionary. Unknown IDs
            are absent from the result.
        """
        ...

    def list_available(self, user_id: str) -> List[Dict[str, Any]]:
        """
        List the exercises a user can log: global plus the user's custom ones.

        Args:
            user_id: User ID

        Returns:
            Exercises sorted by name
        """
        ...

    def create_custom(
        self,
        user_id: str,
        *,
        name: str,
        muscle_group: Optional[str] = None,
        equipment: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a custom exercise owned by a user.

        Returns:
            Created exercise dictionary with generated ID
        """
        ...

    def global_names(self) -> Set[str]:
        """Return the names of all global exercises."""
        ...

    def seed_global(self, exercises: List[Dict[str, Any]]) -> int:
        """
        Insert global catalog entries.

        Args:
            exercises: Dicts with name, muscle_group, equipment

        Returns:
            Number of exercises inserted
        """
        ...
