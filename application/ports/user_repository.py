"""
User Repository Interface (Port).

This module defines the abstract interface for user profile persistence.
A user record carries display preferences and the stored streak counters
maintained by the streak engine.
"""
from typing import Protocol, Optional, Dict, Any


class UserRepository(Protocol):
    """
    Abstract interface for user profile persistence.

    Users are keyed by the auth provider's subject (Clerk user ID) and are
    created lazily the first time they are accessed.
    """

    def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a user by ID.

        Args:
            user_id: Auth subject (Clerk user ID)

        Returns:
            User dictionary or None if the user has never been created
        """
        ...

    def get_or_create(
        self,
        user_id: str,
        *,
        email: str = "",
    ) -> Dict[str, Any]:
        """
        Get a user, creating the record on first access.

        New users start with units="lb", zero streak counters and no
        weekly goal. Creation is idempotent per user ID.

        Args:
            user_id: Auth subject (Clerk user ID)
            email: Email address stored on creation only

        Returns:
            User dictionary
        """
        ...

    def update(self, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Patch a user record.

        Args:
            user_id: Auth subject (Clerk user ID)
            fields: Columns to overwrite

        Returns:
            Updated user dictionary
        """
        ...
