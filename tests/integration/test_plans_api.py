"""
Integration tests for the plans API.

Covers creation with validation, the single-active-plan rule, wholesale
day replacement, activation, deletion and the today template.
"""

import pytest

pytestmark = pytest.mark.integration

TEST_USER_ID = "test-user-123"
OTHER_USER_ID = "other-user-456"


def day(weekday, *exercise_ids, name=None):
    return {
        "weekday": weekday,
        "name": name,
        "exercises": [
            {"exercise_id": e, "order": i, "sets": [{"reps_target": 8}, {"reps_target": 8}]}
            for i, e in enumerate(exercise_ids)
        ],
    }


def create(client, name="Push Pull", days=None):
    response = client.post("/plans", json={
        "name": name,
        "days": days if days is not None else [day(1, "bench", "ohp"), day(3, "squat")],
    })
    assert response.status_code == 201, response.text
    return response.json()


class TestCreatePlan:
    def test_create_returns_days_with_exercise_details(self, client):
        plan = create(client)

        assert plan["active"] is True
        assert plan["plan_version"] == 1
        assert [d["weekday"] for d in plan["days"]] == [1, 3]
        monday = plan["days"][0]["exercises"]
        assert [e["exercise_id"] for e in monday] == ["bench", "ohp"]
        assert monday[0]["exercise"]["name"] == "Bench Press"

    def test_second_plan_becomes_only_active(self, client, app_with_fake_repos):
        first = create(client, "First")
        second = create(client, "Second")

        assert second["plan_version"] == 2
        assert app_with_fake_repos["plan_repo"].active_count(TEST_USER_ID) == 1
        plans = {p["id"]: p for p in client.get("/plans").json()}
        assert plans[first["id"]]["active"] is False
        assert plans[second["id"]]["active"] is True

    @pytest.mark.parametrize("days,message", [
        ([day(7, "bench")], "between 0 and 6"),
        ([day(-1, "bench")], "between 0 and 6"),
        ([day(1, "bench"), day(1, "squat")], "more than once"),
        ([day(2, "not-an-exercise")], "Unknown exercise"),
    ])
    def test_invalid_days_rejected(self, client, app_with_fake_repos, days, message):
        response = client.post("/plans", json={"name": "Bad", "days": days})

        assert response.status_code == 400
        assert message in response.json()["detail"]
        assert app_with_fake_repos["plan_repo"].count() == 0

    def test_blank_name_rejected(self, client):
        response = client.post("/plans", json={"name": "   ", "days": []})
        assert response.status_code == 400

    def test_other_users_custom_exercise_rejected(self, client, app_with_fake_repos):
        custom = app_with_fake_repos["exercise_repo"].create_custom(OTHER_USER_ID, name="Secret Lift")
        response = client.post("/plans", json={"name": "x", "days": [day(1, custom["id"])]})
        assert response.status_code == 400

    def test_persistence_failure_is_500_without_changes(self, client, app_with_fake_repos):
        existing = create(client, "Keep me")
        repo = app_with_fake_repos["plan_repo"]
        repo.simulate_atomic_failure = True

        response = client.post("/plans", json={"name": "Broken", "days": [day(1, "bench")]})

        assert response.status_code == 500
        assert repo.count() == 1
        assert repo.get_active(TEST_USER_ID)["id"] == existing["id"]


class TestReadPlans:
    def test_get_plan(self, client):
        plan = create(client)
        body = client.get(f"/plans/{plan['id']}").json()
        assert body["name"] == "Push Pull"
        assert len(body["days"]) == 2

    def test_other_users_plan_is_404(self, client, app_with_fake_repos):
        other = app_with_fake_repos["plan_repo"].create_plan_atomic(OTHER_USER_ID, name="x", days=[])
        assert client.get(f"/plans/{other['id']}").status_code == 404

    def test_active_plan_null_without_plans(self, client):
        response = client.get("/plans/active")
        assert response.status_code == 200
        assert response.json() is None

    def test_active_plan(self, client):
        plan = create(client)
        assert client.get("/plans/active").json()["id"] == plan["id"]


class TestTodayTemplate:
    def test_workout_day(self, client):
        create(client)
        body = client.get("/plans/today", params={"date": "2024-01-01"}).json()

        assert body["day"]["weekday"] == 1
        assert [e["exercise_id"] for e in body["exercises"]] == ["bench", "ohp"]

    def test_day_missing_from_plan(self, client):
        create(client)
        body = client.get("/plans/today", params={"date": "2024-01-02"}).json()
        assert body["day"] is None
        assert body["exercises"] == []

    def test_explicit_rest_day(self, client):
        create(client, days=[day(1, "bench"), day(0, name="Rest")])
        body = client.get("/plans/today", params={"date": "2024-01-07"}).json()
        assert body["day"]["name"] == "Rest"
        assert body["exercises"] == []

    def test_no_active_plan(self, client):
        assert client.get("/plans/today", params={"date": "2024-01-01"}).json() is None


class TestUpdatePlan:
    def test_replaces_days_wholesale(self, client):
        plan = create(client)
        response = client.put(f"/plans/{plan['id']}", json={
            "name": "Legs Only",
            "days": [day(5, "squat", "deadlift")],
        })

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Legs Only"
        assert [d["weekday"] for d in body["days"]] == [5]

    def test_invalid_update_leaves_plan(self, client):
        plan = create(client)
        response = client.put(f"/plans/{plan['id']}", json={"days": [day(9, "bench")]})

        assert response.status_code == 400
        assert len(client.get(f"/plans/{plan['id']}").json()["days"]) == 2

    def test_missing_plan_is_404(self, client):
        assert client.put("/plans/missing", json={"days": []}).status_code == 404

    def test_persistence_failure_is_500(self, client, app_with_fake_repos):
        plan = create(client)
        app_with_fake_repos["plan_repo"].simulate_atomic_failure = True
        response = client.put(f"/plans/{plan['id']}", json={"days": [day(2, "bench")]})
        assert response.status_code == 500


class TestActivateAndDelete:
    def test_activate_switches_active_plan(self, client, app_with_fake_repos):
        first = create(client, "First")
        create(client, "Second")

        response = client.post(f"/plans/{first['id']}/activate")

        assert response.status_code == 200
        assert response.json()["active"] is True
        assert client.get("/plans/active").json()["id"] == first["id"]
        assert app_with_fake_repos["plan_repo"].active_count(TEST_USER_ID) == 1

    def test_activate_other_users_plan_is_404(self, client, app_with_fake_repos):
        other = app_with_fake_repos["plan_repo"].create_plan_atomic(OTHER_USER_ID, name="x", days=[])
        assert client.post(f"/plans/{other['id']}/activate").status_code == 404
        assert app_with_fake_repos["plan_repo"].get_active(OTHER_USER_ID)["id"] == other["id"]

    def test_delete(self, client):
        plan = create(client)
        assert client.delete(f"/plans/{plan['id']}").status_code == 204
        assert client.get(f"/plans/{plan['id']}").status_code == 404

    def test_delete_other_users_plan_is_404(self, client, app_with_fake_repos):
        other = app_with_fake_repos["plan_repo"].create_plan_atomic(OTHER_USER_ID, name="x", days=[])
        assert client.delete(f"/plans/{other['id']}").status_code == 404
        assert app_with_fake_repos["plan_repo"].count() == 1
