"""Integration tests for the session-token lifecycle over HTTP."""

from __future__ import annotations

from datetime import timedelta

import pytest

from tests.factories.user import UserFactory
from tubehub.repositories.user import UserRepository

BASE = "/api/v1/users"
PASSWORD = "p@ss"


def _set_cookies(resp) -> dict[str, str]:
    """Map cookie name -> raw ``Set-Cookie`` header."""
    return {h.split("=", 1)[0]: h for h in resp.headers.getlist("Set-Cookie")}


def _cookie(client, name: str) -> str | None:
    cookie = client.get_cookie(name)
    return cookie.value if cookie is not None else None


@pytest.fixture()
def ana(db):
    return UserFactory(email="ana@x.io", username="ana", full_name="Ana", password=PASSWORD)


def _login(client, **payload):
    return client.post(f"{BASE}/login", json=payload)


# ------------------------------- Login ------------------------------------ #
class TestLogin:
    def test_sets_cookies_and_stores_refresh_token(self, client, ana):
        resp = _login(client, email="ana@x.io", password=PASSWORD)

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["user"]["email"] == "ana@x.io"
        assert "password_hash" not in data["user"]
        assert "refresh_token" not in data["user"]
        assert _cookie(client, "accessToken") == data["access_token"]
        assert _cookie(client, "refreshToken") == data["refresh_token"]
        assert UserRepository().get_refresh_token(ana.id) == data["refresh_token"]

    def test_cookie_attributes(self, client, ana):
        resp = _login(client, username="ana", password=PASSWORD)
        cookies = _set_cookies(resp)

        for name, max_age in (("accessToken", 15 * 60), ("refreshToken", 10 * 24 * 3600)):
            header = cookies[name]
            assert "HttpOnly" in header
            assert "Secure" in header
            assert "SameSite=Lax" in header
            assert "Path=/" in header
            assert f"Max-Age={max_age}" in header

    def test_wrong_password(self, client, ana):
        _login(client, email="ana@x.io", password=PASSWORD)
        before = UserRepository().get_refresh_token(ana.id)

        resp = _login(client, email="ana@x.io", password="wrong")

        assert resp.status_code == 401
        assert resp.mimetype == "application/problem+json"
        assert resp.get_json()["code"] == "invalid_credentials"
        assert UserRepository().get_refresh_token(ana.id) == before

    def test_unknown_user(self, client, db):
        resp = _login(client, email="nobody@x.io", password=PASSWORD)
        assert resp.status_code == 404
        assert resp.get_json()["code"] == "user_not_found"

    def test_email_matches_even_with_unknown_username(self, client, ana):
        resp = _login(client, email="ana@x.io", username="nobody", password=PASSWORD)

        assert resp.status_code == 200
        assert resp.get_json()["data"]["user"]["id"] == ana.id

    def test_username_matches_even_with_unknown_email(self, client, ana):
        resp = _login(client, email="ghost@x.io", username="ANA", password=PASSWORD)

        assert resp.status_code == 200

    def test_missing_identifier(self, client, db):
        resp = _login(client, password=PASSWORD)
        assert resp.status_code == 422
        assert resp.get_json()["code"] == "validation_error"


# ------------------------------ Refresh ----------------------------------- #
class TestRefresh:
    def test_rotation_via_cookie(self, client, ana):
        t1 = _login(client, email="ana@x.io", password=PASSWORD).get_json()["data"]

        resp = client.post(f"{BASE}/refresh-token")

        assert resp.status_code == 200
        t2 = resp.get_json()["data"]
        assert t2["refresh_token"] != t1["refresh_token"]
        assert _cookie(client, "refreshToken") == t2["refresh_token"]
        assert _cookie(client, "accessToken") == t2["access_token"]
        assert UserRepository().get_refresh_token(ana.id) == t2["refresh_token"]

    def test_rotation_via_body(self, client, ana):
        t1 = _login(client, email="ana@x.io", password=PASSWORD).get_json()["data"]
        client.delete_cookie("refreshToken")

        resp = client.post(f"{BASE}/refresh-token", json={"refreshToken": t1["refresh_token"]})

        assert resp.status_code == 200

    def test_cookie_takes_precedence_over_body(self, client, ana):
        _login(client, email="ana@x.io", password=PASSWORD)

        resp = client.post(f"{BASE}/refresh-token", json={"refreshToken": "garbage"})

        assert resp.status_code == 200

    def test_replayed_token_rejected(self, client, ana):
        t1 = _login(client, email="ana@x.io", password=PASSWORD).get_json()["data"]
        t2 = client.post(f"{BASE}/refresh-token").get_json()["data"]
        client.delete_cookie("refreshToken")

        resp = client.post(f"{BASE}/refresh-token", json={"refreshToken": t1["refresh_token"]})

        assert resp.status_code == 401
        assert resp.get_json()["code"] == "unauthorized"
        assert UserRepository().get_refresh_token(ana.id) == t2["refresh_token"]

    def test_missing_token(self, client, db):
        resp = client.post(f"{BASE}/refresh-token")
        assert resp.status_code == 401

    def test_non_string_body_field_is_ignored(self, client, db):
        resp = client.post(f"{BASE}/refresh-token", json={"refreshToken": 123})
        assert resp.status_code == 401

    def test_expired_refresh_token(self, client, ana, freeze_time):
        with freeze_time("2024-01-01 12:00:00") as frozen:
            _login(client, email="ana@x.io", password=PASSWORD)
            frozen.tick(timedelta(days=10, seconds=1))
            token = _cookie(client, "refreshToken")
            client.delete_cookie("refreshToken")
            resp = client.post(f"{BASE}/refresh-token", json={"refreshToken": token})

        assert resp.status_code == 401


# ------------------------------- Logout ----------------------------------- #
class TestLogout:
    def test_clears_cookies_and_store(self, client, ana):
        t1 = _login(client, email="ana@x.io", password=PASSWORD).get_json()["data"]

        resp = client.post(f"{BASE}/logout")

        assert resp.status_code == 200
        assert UserRepository().get_refresh_token(ana.id) is None
        assert _cookie(client, "accessToken") is None
        assert _cookie(client, "refreshToken") is None

        again = client.post(f"{BASE}/refresh-token", json={"refreshToken": t1["refresh_token"]})
        assert again.status_code == 401

    def test_requires_access_token(self, client, db):
        resp = client.post(f"{BASE}/logout")
        assert resp.status_code == 401

    def test_bearer_header_accepted(self, client, ana):
        t1 = _login(client, email="ana@x.io", password=PASSWORD).get_json()["data"]
        client.delete_cookie("accessToken")

        resp = client.post(
            f"{BASE}/logout", headers={"Authorization": f"Bearer {t1['access_token']}"}
        )

        assert resp.status_code == 200

    def test_refresh_token_is_not_an_access_token(self, client, ana):
        t1 = _login(client, email="ana@x.io", password=PASSWORD).get_json()["data"]
        client.delete_cookie("accessToken")

        resp = client.post(
            f"{BASE}/logout", headers={"Authorization": f"Bearer {t1['refresh_token']}"}
        )

        assert resp.status_code == 401


# ------------------------------ Scenario ---------------------------------- #
def test_end_to_end_session_lifecycle(client, ana):
    """Login, refresh twice, replay, logout, then refresh again."""

    t1 = _login(client, email="ana@x.io", password=PASSWORD).get_json()["data"]
    client.delete_cookie("refreshToken")

    r2 = client.post(f"{BASE}/refresh-token", json={"refreshToken": t1["refresh_token"]})
    assert r2.status_code == 200
    t2 = r2.get_json()["data"]
    client.delete_cookie("refreshToken")

    replay = client.post(f"{BASE}/refresh-token", json={"refreshToken": t1["refresh_token"]})
    assert replay.status_code == 401

    r3 = client.post(f"{BASE}/refresh-token", json={"refreshToken": t2["refresh_token"]})
    assert r3.status_code == 200
    t3 = r3.get_json()["data"]
    assert UserRepository().get_refresh_token(ana.id) == t3["refresh_token"]

    logout = client.post(
        f"{BASE}/logout", headers={"Authorization": f"Bearer {t3['access_token']}"}
    )
    assert logout.status_code == 200
    assert UserRepository().get_refresh_token(ana.id) is None

    after = client.post(f"{BASE}/refresh-token", json={"refreshToken": t3["refresh_token"]})
    assert after.status_code == 401
