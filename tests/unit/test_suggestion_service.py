"""
Unit tests for SuggestionService.

Tests cover:
- Single-exercise suggestions and their reasons
- Batch suggestions with suggested next weight
- Last logged weights for the logging form
"""
import pytest
from datetime import date, timedelta

from backend.core.progression_service import ProgressionService
from backend.core.suggestion_service import SuggestionService, NOT_ENOUGH_DATA
from domain.models.suggestion import (
    IncreaseSuggestion,
    DecreaseSuggestion,
    MaintainSuggestion,
    UnknownSuggestion,
)
from tests.fakes import FakeSessionRepository, FakeExerciseRepository, create_user_repo

USER = "user-1"
START = date(2024, 2, 1)


@pytest.fixture
def session_repo():
    return FakeSessionRepository()


@pytest.fixture
def user_repo():
    return create_user_repo(user_id=USER, units="lb")


@pytest.fixture
def service(session_repo, user_repo):
    return SuggestionService(session_repo, FakeExerciseRepository(), user_repo)


def log(session_repo, day_offset, exercise_id, weight, reps, completed=True):
    """Log one set on START + day_offset."""
    return session_repo.add_completed_session(
        USER,
        START + timedelta(days=day_offset),
        sets=[{"exercise_id": exercise_id, "weight": weight, "reps_actual": reps}],
        completed=completed,
    )


# =============================================================================
# Single Suggestions
# =============================================================================


@pytest.mark.unit
class TestExerciseSuggestion:
    def test_not_enough_data(self, service, session_repo):
        log(session_repo, 0, "bench", 100, 8)

        result = service.get_exercise_suggestions(USER, "bench")

        assert isinstance(result.suggestion, UnknownSuggestion)
        assert result.reason == NOT_ENOUGH_DATA
        assert result.amount is None
        assert result.last_weight is None

    def test_increase(self, service, session_repo):
        log(session_repo, 0, "bench", 100, 8)
        log(session_repo, 2, "bench", 100, 9)

        result = service.get_exercise_suggestions(USER, "bench")

        assert isinstance(result.suggestion, IncreaseSuggestion)
        assert result.amount == 2.5
        assert result.last_weight == 100
        assert result.reason == (
            "You've been consistent at 100 lb for Bench Press. "
            "Try adding 2.5 lb next session!"
        )

    def test_decrease(self, service, session_repo):
        log(session_repo, 0, "squat", 150, 4)
        log(session_repo, 2, "squat", 150, 5)

        result = service.get_exercise_suggestions(USER, "squat")

        assert isinstance(result.suggestion, DecreaseSuggestion)
        assert result.amount == 15
        assert "Consider dropping to 135 lb" in result.reason

    def test_maintain(self, service, session_repo):
        log(session_repo, 0, "bench", 100, 8)
        log(session_repo, 2, "bench", 100, 7)

        result = service.get_exercise_suggestions(USER, "bench")

        assert isinstance(result.suggestion, MaintainSuggestion)
        assert result.reason == "Keep working at 100 lb for Bench Press. You're making progress!"

    def test_uses_users_unit(self, session_repo):
        service = SuggestionService(
            session_repo,
            FakeExerciseRepository(),
            create_user_repo(user_id=USER, units="kg"),
        )
        log(session_repo, 0, "bench", 60, 8)
        log(session_repo, 2, "bench", 60, 8)
        assert "2.5 kg" in service.get_exercise_suggestions(USER, "bench").reason

    def test_uses_two_newest_sessions(self, service, session_repo):
        """Older sessions do not influence the classification."""
        log(session_repo, 0, "bench", 100, 3)
        log(session_repo, 2, "bench", 100, 3)
        log(session_repo, 4, "bench", 100, 8)
        log(session_repo, 6, "bench", 100, 8)

        result = service.get_exercise_suggestions(USER, "bench")

        assert isinstance(result.suggestion, IncreaseSuggestion)
        assert len(result.recent_sessions) == 4
        assert result.recent_sessions[0]["date"] == (START + timedelta(days=6)).isoformat()

    def test_top_set_drives_classification(self, service, session_repo):
        for offset in (0, 2):
            session_repo.add_completed_session(USER, START + timedelta(days=offset), sets=[
                {"exercise_id": "bench", "weight": 100, "reps_actual": 8},
                {"exercise_id": "bench", "weight": 80, "reps_actual": 3},
            ])
        result = service.get_exercise_suggestions(USER, "bench")
        assert isinstance(result.suggestion, IncreaseSuggestion)


# =============================================================================
# Batch Suggestions
# =============================================================================


@pytest.mark.unit
class TestBatchSuggestions:
    def test_mixed_batch(self, service, session_repo):
        log(session_repo, 0, "bench", 120, 8)
        log(session_repo, 1, "squat", 150, 4)
        log(session_repo, 2, "bench", 120, 8)
        log(session_repo, 3, "squat", 150, 4)
        log(session_repo, 4, "deadlift", 180, 5)

        results = service.get_batch_exercise_suggestions(USER, ["bench", "squat", "deadlift", "ohp"])

        assert results["bench"].suggestion.action == "increase"
        assert results["bench"].suggested_weight == 125
        assert results["bench"].last_weight == 120
        assert results["squat"].suggestion.action == "decrease"
        assert results["squat"].suggested_weight == 135
        assert isinstance(results["deadlift"].suggestion, UnknownSuggestion)
        assert results["deadlift"].last_weight is None
        assert isinstance(results["ohp"].suggestion, UnknownSuggestion)

    def test_maintain_has_no_suggested_weight(self, service, session_repo):
        log(session_repo, 0, "bench", 100, 8)
        log(session_repo, 2, "bench", 100, 7)

        result = service.get_batch_exercise_suggestions(USER, ["bench"])["bench"]

        assert result.suggestion.action == "maintain"
        assert result.suggested_weight is None
        assert result.last_weight == 100

    def test_agrees_with_single_form(self, service, session_repo):
        log(session_repo, 0, "bench", 100, 8)
        log(session_repo, 2, "bench", 100, 9)
        single = service.get_exercise_suggestions(USER, "bench")
        batch = service.get_batch_exercise_suggestions(USER, ["bench"])["bench"]
        assert single.suggestion.action == batch.suggestion.action


# =============================================================================
# Last Weights
# =============================================================================


@pytest.mark.unit
class TestLastWeights:
    def test_latest_completed_session_sets(self, service, session_repo):
        log(session_repo, 0, "bench", 95, 8)
        session_repo.add_completed_session(USER, START + timedelta(days=2), sets=[
            {"exercise_id": "bench", "weight": 100, "reps_actual": 8},
            {"exercise_id": "bench", "weight": 100, "reps_actual": 7},
        ])
        log(session_repo, 4, "bench", 110, 5, completed=False)

        result = service.get_last_weights(USER, ["bench", "squat"])

        assert set(result) == {"bench"}
        assert result["bench"]["date"] == (START + timedelta(days=2)).isoformat()
        assert result["bench"]["sets"] == [
            {"set_index": 0, "weight": 100, "reps_actual": 8},
            {"set_index": 1, "weight": 100, "reps_actual": 7},
        ]


# =============================================================================
# Top Set Ties
# =============================================================================


@pytest.mark.unit
class TestTopSetTies:
    """Equal top weights resolve to the first set logged, in every view."""

    @pytest.fixture
    def tied_sessions(self, session_repo):
        # Set index 1 is logged before set index 0 on both days
        for offset in (0, 2):
            session_repo.add_completed_session(USER, START + timedelta(days=offset), sets=[
                {"exercise_id": "bench", "set_index": 1, "weight": 100, "reps_actual": 5},
                {"exercise_id": "bench", "set_index": 0, "weight": 100, "reps_actual": 10},
            ])

    def test_suggestion_uses_first_logged_set(self, service, tied_sessions):
        result = service.get_exercise_suggestions(USER, "bench")
        assert isinstance(result.suggestion, DecreaseSuggestion)
        assert [s["set_index"] for s in result.recent_sessions[0]["sets"]] == [0, 1]

    def test_history_and_suggestion_agree(self, service, session_repo, tied_sessions):
        history = ProgressionService(session_repo, FakeExerciseRepository()).get_exercise_history(
            USER, "bench", days=30, today=START + timedelta(days=3),
        )
        batch = service.get_batch_exercise_suggestions(USER, ["bench"])

        assert [p.top_set_reps for p in history.history] == [5, 5]
        assert isinstance(batch["bench"].suggestion, DecreaseSuggestion)
