"""
Tests for the Supabase repository implementations.

The Supabase client is replaced by a MagicMock whose query builder returns
itself from every chained call, so tests can assert on the filters used
and control what execute() returns.
"""
import pytest
from unittest.mock import MagicMock

from application.exceptions import PlanPersistenceError
from infrastructure.db import (
    SupabaseUserRepository,
    SupabaseExerciseRepository,
    SupabasePlanRepository,
    SupabaseSessionRepository,
    SupabaseAchievementRepository,
)
from infrastructure.db.session_repository import PAGE_SIZE, ID_CHUNK_SIZE

# All tests in this module are pure logic tests with mocks - mark as unit
pytestmark = pytest.mark.unit

BUILDER_METHODS = (
    "select", "eq", "in_", "or_", "order", "limit", "range", "gte", "is_",
    "update", "upsert", "insert", "delete",
)


def make_client(*results):
    """
    Build a mock Supabase client.

    Each positional argument is the ``data`` of one execute() call, in order.
    """
    builder = MagicMock()
    for method in BUILDER_METHODS:
        getattr(builder, method).return_value = builder
    builder.not_ = builder
    builder.execute.side_effect = [MagicMock(data=data) for data in results]

    client = MagicMock()
    client.table.return_value = builder
    client.rpc.return_value = builder
    return client, builder


# ============================================================================
# Sessions
# ============================================================================


class TestSupabaseSessionRepository:
    def test_mark_completed_is_conditional(self):
        client, builder = make_client([{"id": "s1"}])
        repo = SupabaseSessionRepository(client)

        assert repo.mark_completed("s1", completed_at="2024-01-01T10:00:00Z") is True
        builder.is_.assert_called_with("completed_at", "null")

    def test_mark_completed_already_done(self):
        client, _ = make_client([])
        repo = SupabaseSessionRepository(client)
        assert repo.mark_completed("s1", completed_at="2024-01-01T10:00:00Z") is False

    def test_get_or_create_returns_existing(self):
        client, builder = make_client([{"id": "s1", "date": "2024-01-01"}])
        repo = SupabaseSessionRepository(client)

        assert repo.get_or_create("u1", "2024-01-01", weekday=1)["id"] == "s1"
        builder.upsert.assert_not_called()

    def test_get_or_create_upserts_on_unique_key(self):
        client, builder = make_client([], [], [{"id": "s2", "date": "2024-01-01"}])
        repo = SupabaseSessionRepository(client)

        session = repo.get_or_create("u1", "2024-01-01", weekday=1, plan_id="p1")

        assert session["id"] == "s2"
        payload = builder.upsert.call_args.args[0]
        assert payload["weekday"] == 1
        assert payload["plan_id"] == "p1"
        assert builder.upsert.call_args.kwargs == {
            "on_conflict": "user_id,date",
            "ignore_duplicates": True,
        }

    def test_upsert_set_conflict_key(self):
        client, builder = make_client([{"id": "set1", "weight": 100}])
        repo = SupabaseSessionRepository(client)

        repo.upsert_set("s1", "bench", 0, reps_actual=8, weight=100)

        assert builder.upsert.call_args.kwargs["on_conflict"] == "session_id,exercise_id,set_index"

    def test_get_sets_without_sessions_skips_query(self):
        client, _ = make_client()
        repo = SupabaseSessionRepository(client)
        assert repo.get_sets([]) == []
        client.table.assert_not_called()

    def test_get_sets_with_empty_exercise_filter(self):
        client, _ = make_client()
        repo = SupabaseSessionRepository(client)
        assert repo.get_sets(["s1"], exercise_ids=[]) == []

    def test_list_by_user_filters(self):
        client, builder = make_client([{"id": "s1"}])
        repo = SupabaseSessionRepository(client)

        repo.list_by_user("u1", since="2024-01-01", limit=5, completed_only=True)

        builder.gte.assert_called_with("date", "2024-01-01")
        builder.is_.assert_called_with("completed_at", "null")
        builder.order.assert_any_call("date", desc=True)
        builder.range.assert_called_once_with(0, 4)

    def test_list_by_user_reads_every_page(self):
        first_page = [{"id": f"s{i}"} for i in range(PAGE_SIZE)]
        client, builder = make_client(first_page, [{"id": "last"}])
        repo = SupabaseSessionRepository(client)

        sessions = repo.list_by_user("u1")

        assert len(sessions) == PAGE_SIZE + 1
        assert builder.range.call_args_list[0].args == (0, PAGE_SIZE - 1)
        assert builder.range.call_args_list[1].args == (PAGE_SIZE, 2 * PAGE_SIZE - 1)

    def test_get_sets_pages_past_row_cap(self):
        first_page = [{"id": f"x{i}", "created_at": "2024-01-01"} for i in range(PAGE_SIZE)]
        client, builder = make_client(first_page, [{"id": "y", "created_at": "2024-01-02"}])
        repo = SupabaseSessionRepository(client)

        sets = repo.get_sets(["s1", "s2"])

        assert len(sets) == PAGE_SIZE + 1
        assert builder.execute.call_count == 2

    def test_get_sets_chunks_session_ids(self):
        session_ids = [f"s{i}" for i in range(ID_CHUNK_SIZE + 1)]
        client, builder = make_client(
            [{"id": "a", "created_at": "2024-01-02"}],
            [{"id": "b", "created_at": "2024-01-01"}],
        )
        repo = SupabaseSessionRepository(client)

        sets = repo.get_sets(session_ids)

        chunks = [c.args[1] for c in builder.in_.call_args_list if c.args[0] == "session_id"]
        assert [len(c) for c in chunks] == [ID_CHUNK_SIZE, 1]
        assert [s["id"] for s in sets] == ["b", "a"]


# ============================================================================
# Plans
# ============================================================================


class TestSupabasePlanRepository:
    def test_create_plan_passes_days_to_rpc(self):
        client, _ = make_client({"id": "p1", "active": True, "plan_version": 1})
        repo = SupabasePlanRepository(client)
        days = [{"weekday": 1, "name": "Push", "exercises": []}]

        plan = repo.create_plan_atomic("u1", name="PPL", days=days)

        assert plan["id"] == "p1"
        client.rpc.assert_called_with("create_plan_with_days", {
            "p_user_id": "u1",
            "p_name": "PPL",
            "p_days": days,
        })

    def test_rpc_list_result(self):
        client, _ = make_client([{"id": "p1", "active": True}])
        repo = SupabasePlanRepository(client)
        assert repo.set_active("u1", "p1")["id"] == "p1"

    def test_rpc_failure_is_wrapped(self):
        client, builder = make_client()
        builder.execute.side_effect = RuntimeError("connection reset")
        repo = SupabasePlanRepository(client)

        with pytest.raises(PlanPersistenceError):
            repo.set_active("u1", "p1")

    def test_rpc_without_data(self):
        client, _ = make_client([])
        repo = SupabasePlanRepository(client)
        with pytest.raises(PlanPersistenceError):
            repo.replace_days_atomic("p1", days=[])

    def test_get_days_nests_sorted_exercises(self):
        client, _ = make_client([
            {
                "id": "d1",
                "weekday": 1,
                "plan_exercises": [
                    {"exercise_id": "squat", "order": 1},
                    {"exercise_id": "bench", "order": 0},
                ],
            },
        ])
        repo = SupabasePlanRepository(client)

        days = repo.get_days("p1")

        assert "plan_exercises" not in days[0]
        assert [e["exercise_id"] for e in days[0]["exercises"]] == ["bench", "squat"]


# ============================================================================
# Users, Exercises, Achievements
# ============================================================================


class TestSupabaseUserRepository:
    def test_get_or_create_existing(self):
        client, builder = make_client([{"id": "u1", "units": "kg"}])
        repo = SupabaseUserRepository(client)
        assert repo.get_or_create("u1")["units"] == "kg"
        builder.upsert.assert_not_called()

    def test_get_or_create_new_user_defaults(self):
        client, builder = make_client([], [], [{"id": "u1", "units": "lb"}])
        repo = SupabaseUserRepository(client)

        repo.get_or_create("u1", email="a@b.c")

        payload = builder.upsert.call_args.args[0]
        assert payload["units"] == "lb"
        assert payload["current_streak"] == 0
        assert payload["email"] == "a@b.c"


class TestSupabaseExerciseRepository:
    def test_list_available_includes_global_and_own(self):
        client, builder = make_client([{"id": "e1", "name": "Bench Press"}])
        repo = SupabaseExerciseRepository(client)

        repo.list_available("u1")

        builder.or_.assert_called_with("is_global.eq.true,user_id.eq.u1")
        builder.order.assert_called_with("name")

    def test_get_many_keys_by_id(self):
        client, _ = make_client([{"id": "e1"}, {"id": "e2"}])
        repo = SupabaseExerciseRepository(client)
        assert set(repo.get_many(["e1", "e2"])) == {"e1", "e2"}

    def test_get_many_empty(self):
        client, _ = make_client()
        assert SupabaseExerciseRepository(client).get_many([]) == {}

    def test_global_names(self):
        client, builder = make_client([{"name": "Bench Press"}, {"name": "Deadlift"}])
        repo = SupabaseExerciseRepository(client)

        assert repo.global_names() == {"Bench Press", "Deadlift"}
        builder.eq.assert_called_with("is_global", True)

    def test_create_custom_is_owned(self):
        client, builder = make_client([{"id": "e9", "name": "Zercher Squat"}])
        repo = SupabaseExerciseRepository(client)

        repo.create_custom("u1", name="Zercher Squat", muscle_group="Legs")

        payload = builder.insert.call_args.args[0]
        assert payload["is_global"] is False
        assert payload["user_id"] == "u1"


class TestSupabaseAchievementRepository:
    def test_unlock_new(self):
        client, builder = make_client([{"id": "a1", "type": "streak_7"}])
        repo = SupabaseAchievementRepository(client)

        result = repo.unlock("u1", "streak_7", unlocked_at="2024-01-07T10:00:00Z")

        assert result["type"] == "streak_7"
        assert builder.upsert.call_args.kwargs == {
            "on_conflict": "user_id,type",
            "ignore_duplicates": True,
        }

    def test_unlock_duplicate_returns_none(self):
        client, _ = make_client([])
        repo = SupabaseAchievementRepository(client)
        assert repo.unlock("u1", "streak_7", unlocked_at="2024-01-07T10:00:00Z") is None
