"""
Tests for the /api/steps endpoints.
"""
from quest_api.utils.dates import utc_today


class TestLogStepsEndpoint:
    def test_requires_auth(self, client):
        response = client.post("/api/steps", json={"step_count": 100, "recorded_date": "2024-03-01"})
        assert response.status_code == 401

    def test_create_then_update(self, client, auth_headers):
        body = {"step_count": 10000, "recorded_date": "2024-03-01"}

        created = client.post("/api/steps", json=body, headers=auth_headers)
        assert created.status_code == 201
        assert created.json()["action"] == "created"
        assert created.json()["step"]["miles"] == 5.0
        assert created.json()["message"] == "Steps logged successfully"

        body["step_count"] = 12000
        updated = client.post("/api/steps", json=body, headers=auth_headers)
        assert updated.status_code == 200
        assert updated.json()["action"] == "updated"

    def test_invalid_count(self, client, auth_headers):
        response = client.post("/api/steps", json={"step_count": -3, "recorded_date": "2024-03-01"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_huge_count_is_a_validation_error(self, client, auth_headers):
        response = client.post(
            "/api/steps", json={"step_count": 10**30, "recorded_date": "2024-03-01"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_invalid_date(self, client, auth_headers):
        response = client.post("/api/steps", json={"step_count": 3, "recorded_date": "2024-02-31"}, headers=auth_headers)
        assert response.status_code == 400


class TestListSteps:
    def _seed(self, client, headers):
        for day, count in [("2024-03-01", 1000), ("2024-03-02", 2000), ("2024-03-03", 3000)]:
            client.post("/api/steps", json={"step_count": count, "recorded_date": day}, headers=headers)

    def test_newest_first_with_summary(self, client, auth_headers):
        self._seed(client, auth_headers)

        body = client.get("/api/steps", headers=auth_headers).json()

        assert [s["recorded_date"] for s in body["steps"]] == ["2024-03-03", "2024-03-02", "2024-03-01"]
        assert body["summary"] == {"total_steps": 6000, "total_miles": 3.0, "record_count": 3}

    def test_date_range_and_limit(self, client, auth_headers):
        self._seed(client, auth_headers)

        body = client.get(
            "/api/steps",
            params={"start_date": "2024-03-02", "end_date": "2024-03-03", "limit": 1},
            headers=auth_headers,
        ).json()

        assert [s["recorded_date"] for s in body["steps"]] == ["2024-03-03"]

    def test_bad_limit(self, client, auth_headers):
        assert client.get("/api/steps", params={"limit": 0}, headers=auth_headers).status_code == 400
        assert client.get("/api/steps", params={"limit": 366}, headers=auth_headers).status_code == 400

    def test_bad_date_filter(self, client, auth_headers):
        response = client.get("/api/steps", params={"start_date": "yesterday"}, headers=auth_headers)
        assert response.status_code == 400


class TestToday:
    def test_nothing_logged(self, client, auth_headers):
        body = client.get("/api/steps/today", headers=auth_headers).json()
        assert body["step"] is None

    def test_logged_today(self, client, auth_headers):
        today = utc_today().isoformat()
        client.post("/api/steps", json={"step_count": 777, "recorded_date": today}, headers=auth_headers)
        body = client.get("/api/steps/today", headers=auth_headers).json()
        assert body["step"]["step_count"] == 777


class TestJourneyEndpoints:
    def test_progress(self, client, auth_headers):
        client.post("/api/steps", json={"step_count": 342000, "recorded_date": "2024-03-01"}, headers=auth_headers)

        body = client.get("/api/steps/progress", headers=auth_headers).json()

        assert body["user"]["total_steps"] == 342000
        assert body["user"]["total_miles"] == 171.0
        journey = body["journey"]
        assert journey["current_milestone"]["name"] == "Bree"
        assert journey["next_milestone"]["name"] == "Weathertop"
        assert journey["milestones_reached_count"] == 3
        assert journey["progress_to_next_milestone"] == 50
        assert journey["total_journey_miles"] == 1779

    def test_milestones(self, client, auth_headers):
        body = client.get("/api/steps/milestones", headers=auth_headers).json()
        assert len(body["milestones"]) == 20
        assert body["milestones"][0]["name"] == "Bag End"
        assert body["milestones"][-1]["distance_from_start"] == 1779

    def test_achievements(self, client, auth_headers):
        client.post("/api/steps", json={"step_count": 1, "recorded_date": "2024-03-01"}, headers=auth_headers)
        body = client.get("/api/steps/achievements", headers=auth_headers).json()
        assert body["unlocked_count"] == 1
        assert body["total_count"] == 13
