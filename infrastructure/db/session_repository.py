"""
Supabase implementation of SessionRepository.

Tables:
- sessions: unique on (user_id, date)
- session_sets: unique on (session_id, exercise_id, set_index)

Both get-or-create and set logging are upserts on those unique keys, and
completion is a conditional update on `completed_at IS NULL`.
"""
import logging
from typing import Optional, List, Dict, Any

from supabase import Client

logger = logging.getLogger(__name__)

# PostgREST caps each response at 1000 rows
PAGE_SIZE = 1000
# Session ids per `in.(...)` filter
ID_CHUNK_SIZE = 100


def _fetch_all(build_query, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Read every row of a query one `.range()` page at a time.

    ``build_query`` returns a fresh, fully filtered and ordered query; it is
    called once per page.
    """
    rows: List[Dict[str, Any]] = []
    offset = 0
    while True:
        page_size = PAGE_SIZE if limit is None else min(PAGE_SIZE, limit - len(rows))
        page = build_query() \
            .range(offset, offset + page_size - 1) \
            .execute().data or []
        rows.extend(page)
        if len(page) < page_size or (limit is not None and len(rows) >= limit):
            return rows
        offset += page_size


class SupabaseSessionRepository:
    """
    Supabase-backed session and set repository.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
        """
        self._client = client

    def get_by_id(self, session_id: str) -> Optional[Dict[str, Any]]:
        result = self._client.table("sessions").select("*").eq("id", session_id).execute()
        return result.data[0] if result.data else None

    def get_by_date(self, user_id: str, session_date: str) -> Optional[Dict[str, Any]]:
        result = self._client.table("sessions") \
            .select("*") \
            .eq("user_id", user_id) \
            .eq("date", session_date) \
            .limit(1) \
            .execute()
        return result.data[0] if result.data else None

    def get_or_create(
        self,
        user_id: str,
        session_date: str,
        *,
        weekday: int,
        plan_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        existing = self.get_by_date(user_id, session_date)
        if existing:
            return existing

        self._client.table("sessions").upsert({
            "user_id": user_id,
            "date": session_date,
            "weekday": weekday,
            "plan_id": plan_id,
        }, on_conflict="user_id,date", ignore_duplicates=True).execute()

        session = self.get_by_date(user_id, session_date)
        if session is None:
            raise RuntimeError(f"Session for {user_id} on {session_date} missing after insert")
        logger.info(f"Session {session['id']} ready for user {user_id} on {session_date}")
        return session

    def list_by_user(
        self,
        user_id: str,
        *,
        since: Optional[str] = None,
        limit: Optional[int] = None,
        completed_only: bool = False,
    ) -> List[Dict[str, Any]]:
        def build_query():
            query = self._client.table("sessions") \
                .select("*") \
                .eq("user_id", user_id)
            if since:
                query = query.gte("date", since)
            if completed_only:
                query = query.not_.is_("completed_at", "null")
            return query.order("date", desc=True).order("id")

        return _fetch_all(build_query, limit=limit or None)

    def mark_completed(
        self,
        session_id: str,
        *,
        completed_at: str,
        notes: Optional[str] = None,
    ) -> bool:
        result = self._client.table("sessions") \
            .update({"completed_at": completed_at, "notes": notes}) \
            .eq("id", session_id) \
            .is_("completed_at", "null") \
            .execute()
        return bool(result.data)

    def update_notes(self, session_id: str, notes: Optional[str]) -> None:
        self._client.table("sessions") \
            .update({"notes": notes}) \
            .eq("id", session_id) \
            .execute()

    def get_sets(
        self,
        session_ids: List[str],
        *,
        exercise_ids: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        if not session_ids or exercise_ids == []:
            return []

        def build_query(chunk):
            query = self._client.table("session_sets") \
                .select("*") \
                .in_("session_id", chunk)
            if exercise_ids is not None:
                query = query.in_("exercise_id", exercise_ids)
            return query.order("created_at").order("id")

        sets: List[Dict[str, Any]] = []
        for start in range(0, len(session_ids), ID_CHUNK_SIZE):
            chunk = session_ids[start:start + ID_CHUNK_SIZE]
            sets.extend(_fetch_all(lambda: build_query(chunk)))
        if len(session_ids) > ID_CHUNK_SIZE:
            sets.sort(key=lambda s: s.get("created_at") or "")
        return sets

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
        result = self._client.table("session_sets").upsert({
            "session_id": session_id,
            "exercise_id": exercise_id,
            "set_index": set_index,
            "reps_actual": reps_actual,
            "weight": weight,
            "rpe": rpe,
        }, on_conflict="session_id,exercise_id,set_index").execute()
        return result.data[0]
