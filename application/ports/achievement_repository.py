"""
Achievement Repository Interface (Port).

Achievements are append-only and unique per (user, type).
"""
from typing import Protocol, Optional, List, Dict, Any


class AchievementRepository(Protocol):
    """
    Abstract interface for achievement persistence.
    """

    def list_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Get all achievements a user has unlocked, oldest first.
        """
        ...

    def unlock(
        self,
        user_id: str,
        achievement_type: str,
        *,
        unlocked_at: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Insert an achievement unless the user already has one of this type.

        Args:
            user_id: Owner
            achievement_type: e.g. "streak_7"
            unlocked_at: ISO timestamp
            metadata: Extra data, e.g. {"streak": 7}

        Returns:
            The new achievement, or None if it was already unlocked
        """
        ...
