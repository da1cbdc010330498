"""
Supabase implementation of AchievementRepository.

The `achievements` table has a unique index on (user_id, type); unlock is
an insert that ignores the conflict.
"""
import logging
from typing import Optional, List, Dict, Any

from supabase import Client

logger = logging.getLogger(__name__)


class SupabaseAchievementRepository:
    def __init__(self, client: Client):
        self._client = client

    def list_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        result = self._client.table("achievements") \
            .select("*") \
            .eq("user_id", user_id) \
            .order("unlocked_at") \
            .execute()
        return result.data or []

    def unlock(
        self,
        user_id: str,
        achievement_type: str,
        *,
        unlocked_at: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        result = self._client.table("achievements").upsert({
            "user_id": user_id,
            "type": achievement_type,
            "unlocked_at": unlocked_at,
            "metadata": metadata,
        }, on_conflict="user_id,type", ignore_duplicates=True).execute()

        if not result.data:
            logger.debug(f"Achievement {achievement_type} already unlocked for {user_id}")
            return None
        return result.data[0]
