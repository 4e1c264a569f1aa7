"""Integration tests for the authentication endpoints."""

from __future__ import annotations

import pytest

BASE = "/api/v1/auth"

NEO = {"email": "neo@example.com", "username": "neo", "password": "follow-the-rabbit"}


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def registered(client):
    resp = client.post(f"{BASE}/register", json=NEO)
    assert resp.status_code == 201
    return resp.get_json()["data"]


def test_register_returns_token_pair(registered):
    assert set(registered) == {"access_token", "refresh_token", "expires_in", "token_type"}
    assert registered["expires_in"] == 900
    assert registered["token_type"] == "bearer"


def test_end_to_end_session_lifecycle(client, registered):
    # Duplicate registration
    dup = client.post(f"{BASE}/register", json={**NEO, "username": "neo2"})
    assert dup.status_code == 409
    assert dup.get_json()["code"] == "duplicate_user"

    # Wrong password
    bad = client.post(f"{BASE}/login", json={"email": NEO["email"], "password": "nope"})
    assert bad.status_code == 401
    assert bad.get_json()["code"] == "invalid_credentials"

    # Good login
    login = client.post(f"{BASE}/login", json={"email": NEO["email"], "password": NEO["password"]})
    assert login.status_code == 200
    pair = login.get_json()["data"]

    # Rotate
    rotated = client.post(f"{BASE}/refresh", json={"refresh_token": pair["refresh_token"]})
    assert rotated.status_code == 200
    new_pair = rotated.get_json()["data"]
    assert new_pair["refresh_token"] != pair["refresh_token"]

    # Old refresh token is single use
    reuse = client.post(f"{BASE}/refresh", json={"refresh_token": pair["refresh_token"]})
    assert reuse.status_code == 401
    assert reuse.get_json()["code"] == "invalid_token"

    # The new access token works
    me = client.get(f"{BASE}/whoami", headers=_bearer(new_pair["access_token"]))
    assert me.status_code == 200
    assert me.get_json()["data"]["username"] == "neo"

    # Logout ends the session the access token belongs to
    out = client.delete(f"{BASE}/logout", headers=_bearer(new_pair["access_token"]))
    assert out.status_code == 204

    after = client.post(f"{BASE}/refresh", json={"refresh_token": new_pair["refresh_token"]})
    assert after.status_code == 401

    # The session from registration is untouched
    still = client.post(f"{BASE}/refresh", json={"refresh_token": registered["refresh_token"]})
    assert still.status_code == 200


def test_duplicate_username(client, registered):
    resp = client.post(f"{BASE}/register", json={**NEO, "email": "other@example.com"})
    assert resp.status_code == 409
    assert resp.get_json()["code"] == "username_conflict"


def test_logout_all_sessions(client, registered):
    second = client.post(
        f"{BASE}/login", json={"email": NEO["email"], "password": NEO["password"]}
    ).get_json()["data"]

    resp = client.delete(f"{BASE}/logout?all=true", headers=_bearer(second["access_token"]))
    assert resp.status_code == 204

    for token in (registered["refresh_token"], second["refresh_token"]):
        assert client.post(f"{BASE}/refresh", json={"refresh_token": token}).status_code == 401


def test_whoami_requires_bearer(client):
    resp = client.get(f"{BASE}/whoami")

    assert resp.status_code == 401
    assert resp.mimetype == "application/problem+json"
    assert resp.headers["WWW-Authenticate"] == "Bearer"
    body = resp.get_json()
    assert body["code"] == "unauthorized"
    assert body["detail"] == "Invalid or expired token"
    assert body["request_id"]


def test_refresh_token_is_not_an_access_token(client, registered):
    resp = client.get(f"{BASE}/whoami", headers=_bearer(registered["refresh_token"]))
    assert resp.status_code == 401


def test_refresh_with_garbage(client):
    resp = client.post(f"{BASE}/refresh", json={"refresh_token": "not.a.jwt"})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "invalid_token"


def test_validation_errors_are_422(client):
    resp = client.post(f"{BASE}/register", json={"email": "not-an-email", "password": "short"})
    assert resp.status_code == 422
    body = resp.get_json()
    assert body["code"] == "validation_error"
    assert {"email", "username", "password"} <= set(body["details"]["errors"])


def test_request_id_is_echoed(client):
    resp = client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
    assert resp.status_code == 200
    assert resp.headers["X-Request-ID"] == "req-123"
    assert resp.get_json()["db"] == "ok"
