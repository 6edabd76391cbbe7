"""
Tests for POST /api/webhooks/apple-health.
"""
from datetime import date, timedelta

import pytest

from quest_api.apple_health.keys import generate_key
from quest_api.journey.ingestion import log_steps
from quest_api.utils.dates import utc_today

URL = "/api/webhooks/apple-health"


@pytest.fixture
def api_key(db_session, user):
    key, _ = generate_key(db_session, user)
    return key


def _post(client, api_key, **kwargs):
    headers = kwargs.pop("headers", {})
    if api_key is not None:
        headers["X-Apple-Health-API-Key"] = api_key
    return client.post(URL, headers=headers, **kwargs)


class TestWebhookAuth:
    def test_missing_key(self, client):
        response = _post(client, None, json={"steps": 100})
        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    def test_unknown_key(self, client, api_key):
        response = _post(client, "not-a-real-key", json={"steps": 100})
        assert response.status_code == 401

    def test_sync_disabled(self, client, db_session, user, api_key):
        user.apple_health_sync_enabled = False
        db_session.commit()

        response = _post(client, api_key, json={"steps": 100})
        assert response.status_code == 403


class TestWebhookIngest:
    def test_create_then_update(self, client, api_key):
        body = {"step_count": 8000, "recorded_date": "2024-03-01"}

        first = _post(client, api_key, json=body)
        assert first.status_code == 201
        assert first.json()["action"] == "created"
        assert first.json()["step"]["source"] == "apple_health"

        body["step_count"] = 8500
        second = _post(client, api_key, json=body)
        assert second.status_code == 200
        assert second.json()["action"] == "updated"
        assert second.json()["step"]["step_count"] == 8500
        assert second.json()["step"]["id"] == first.json()["step"]["id"]

    def test_bare_number_defaults_to_yesterday(self, client, api_key):
        response = _post(client, api_key, json=1234)
        assert response.status_code == 201
        expected = (utc_today() - timedelta(days=1)).isoformat()
        assert response.json()["step"]["recorded_date"] == expected

    def test_plain_text_body(self, client, api_key):
        response = _post(client, api_key, content="4321", headers={"Content-Type": "text/plain"})
        assert response.status_code == 201
        assert response.json()["step"]["step_count"] == 4321

    def test_invalid_body(self, client, api_key):
        response = _post(client, api_key, json={"walked": "lots"})
        assert response.status_code == 400
        assert "hint" in response.json()

    def test_huge_count_is_rejected(self, client, api_key):
        response = _post(client, api_key, json={"steps": 10**30})
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_updates_last_sync(self, client, db_session, user, api_key):
        _post(client, api_key, json={"steps": 100})
        db_session.refresh(user)
        assert user.apple_health_last_sync_at is not None

    def test_conflict_with_manual_entry(self, client, db_session, user, api_key):
        log_steps(db_session, user_id=user.id, step_count=5000, recorded_date="2024-03-01")

        response = _post(client, api_key, json={"step_count": 9000, "recorded_date": "2024-03-01"})

        assert response.status_code == 409
        body = response.json()
        assert body["existing_source"] == "manual"
        assert body["code"] == "CONFLICT"


class TestWebhookRateLimit:
    def test_eleventh_request_is_rejected(self, client, api_key):
        for i in range(10):
            day = (date(2024, 1, 1) + timedelta(days=i)).isoformat()
            assert _post(client, api_key, json={"step_count": 100, "recorded_date": day}).status_code == 201

        response = _post(client, api_key, json={"step_count": 100, "recorded_date": "2024-02-01"})
        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) > 0
        assert response.json()["retry_after"] > 0

    def test_limit_applies_before_key_lookup(self, client):
        for _ in range(10):
            assert _post(client, "bogus-key", json={"steps": 1}).status_code == 401
        assert _post(client, "bogus-key", json={"steps": 1}).status_code == 429
