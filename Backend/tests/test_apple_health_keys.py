"""
Tests for Apple Health key management under /api/users/apple-health.
"""
from quest_api.utils.crypto import hash_api_key

BASE = "/api/users/apple-health"


class TestKeyLifecycle:
    def test_initial_status(self, client, auth_headers):
        body = client.get(f"{BASE}/status", headers=auth_headers).json()
        assert body == {"enabled": False, "has_api_key": False, "last_sync_at": None, "api_key_created_at": None}

    def test_generate_stores_only_digest(self, client, db_session, user, auth_headers):
        response = client.post(f"{BASE}/generate-key", headers=auth_headers)
        assert response.status_code == 201
        api_key = response.json()["api_key"]

        db_session.refresh(user)
        assert user.apple_health_api_key_hash == hash_api_key(api_key)
        assert user.apple_health_api_key_hash != api_key
        assert user.apple_health_sync_enabled

    def test_regenerate_invalidates_old_key(self, client, auth_headers):
        old = client.post(f"{BASE}/generate-key", headers=auth_headers).json()["api_key"]
        client.post(f"{BASE}/generate-key", headers=auth_headers)

        response = client.post(
            "/api/webhooks/apple-health", json={"steps": 10}, headers={"X-Apple-Health-API-Key": old}
        )
        assert response.status_code == 401

    def test_revoke(self, client, auth_headers):
        client.post(f"{BASE}/generate-key", headers=auth_headers)
        assert client.delete(f"{BASE}/revoke-key", headers=auth_headers).status_code == 200

        body = client.get(f"{BASE}/status", headers=auth_headers).json()
        assert body["has_api_key"] is False
        assert body["enabled"] is False

    def test_enable_without_key(self, client, auth_headers):
        response = client.post(f"{BASE}/enable", headers=auth_headers)
        assert response.status_code == 400

    def test_disable_then_enable(self, client, auth_headers):
        client.post(f"{BASE}/generate-key", headers=auth_headers)

        assert client.post(f"{BASE}/disable", headers=auth_headers).json()["enabled"] is False
        assert client.post(f"{BASE}/enable", headers=auth_headers).json()["enabled"] is True

    def test_requires_auth(self, client):
        assert client.get(f"{BASE}/status").status_code == 401
