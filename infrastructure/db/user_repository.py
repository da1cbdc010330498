"""
Supabase implementation of UserRepository.

Users are keyed by Clerk user ID in the `users` table.
"""
import logging
from typing import Optional, Dict, Any

from supabase import Client

logger = logging.getLogger(__name__)


class SupabaseUserRepository:
    """
    Supabase-backed user repository.

    get_or_create relies on the primary key on `users.id`: the insert is an
    upsert that ignores duplicates, followed by a read.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
        """
        self._client = client

    def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        result = self._client.table("users") \
            .select("*") \
            .eq("id", user_id) \
            .limit(1) \
            .execute()
        return result.data[0] if result.data else None

    def get_or_create(self, user_id: str, *, email: str = "") -> Dict[str, Any]:
        existing = self.get(user_id)
        if existing:
            return existing

        self._client.table("users").upsert({
            "id": user_id,
            "email": email,
            "units": "lb",
            "current_streak": 0,
            "longest_streak": 0,
        }, on_conflict="id", ignore_duplicates=True).execute()
        logger.info(f"Created user record for {user_id}")

        created = self.get(user_id)
        if created is None:
            raise RuntimeError(f"User {user_id} missing after insert")
        return created

    def update(self, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        result = self._client.table("users") \
            .update(fields) \
            .eq("id", user_id) \
            .execute()
        if not result.data:
            logger.warning(f"Update matched no user: {user_id}")
            return self.get_or_create(user_id)
        return result.data[0]
