"""
Supabase implementation of ExerciseRepository.

Queries the `exercises` table. Global rows have is_global = true and no
owner; custom rows carry the owning user_id.
"""
import logging
from typing import Optional, List, Dict, Any, Set

from supabase import Client

logger = logging.getLogger(__name__)


class SupabaseExerciseRepository:
    """
    Supabase implementation of ExerciseRepository protocol.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
        """
        self._client = client

    def get_by_id(self, exercise_id: str) -> Optional[Dict[str, Any]]:
        """
        Get an exercise by ID.

        Args:
            exercise_id: Exercise UUID

        Returns:
            Exercise dictionary or None if not found
        """
        result = self._client.table("exercises").select("*").eq("id", exercise_id).execute()
        return result.data[0] if result.data else None

    def get_many(self, exercise_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        if not exercise_ids:
            return {}
        result = self._client.table("exercises") \
            .select("*") \
            .in_("id", exercise_ids) \
            .execute()
        return {row["id"]: row for row in result.data or []}

    def list_available(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Get global exercises plus the user's custom exercises, by name.
        """
        result = self._client.table("exercises") \
            .select("*") \
            .or_(f"is_global.eq.true,user_id.eq.{user_id}") \
            .order("name") \
            .execute()
        return result.data or []

    def create_custom(
        self,
        user_id: str,
        *,
        name: str,
        muscle_group: Optional[str] = None,
        equipment: Optional[str] = None,
    ) -> Dict[str, Any]:
        result = self._client.table("exercises").insert({
            "name": name,
            "muscle_group": muscle_group,
            "equipment": equipment,
            "is_global": False,
            "user_id": user_id,
        }).execute()
        logger.info(f"Created custom exercise '{name}' for user {user_id}")
        return result.data[0]

    def global_names(self) -> Set[str]:
        result = self._client.table("exercises") \
            .select("name") \
            .eq("is_global", True) \
            .execute()
        return {row["name"] for row in result.data or []}

    def seed_global(self, exercises: List[Dict[str, Any]]) -> int:
        rows = [{**e, "is_global": True, "user_id": None} for e in exercises]
        if not rows:
            return 0
        result = self._client.table("exercises").insert(rows).execute()
        count = len(result.data or [])
        logger.info(f"Seeded {count} global exercises")
        return count
