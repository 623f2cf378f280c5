"""Session gateway: login, /me, logout and revocation-aware verification."""

from __future__ import annotations

from datetime import timedelta

from scout_admin.config import settings
from scout_admin.core import session as session_gateway
from scout_admin.integrations import turnstile


def _turnstile(monkeypatch, ok: bool):
    calls = []

    async def fake_verify(token, remote_ip=None):
        calls.append(token)
        return ok

    monkeypatch.setattr(turnstile, "verify_token", fake_verify)
    return calls


class TestLogin:
    def test_admin_gets_session_cookie(self, client, fake_auth, monkeypatch):
        _turnstile(monkeypatch, ok=True)
        fake_auth.id_tokens["tok"] = {"uid": "a1", "email": "a1@x.org", "role": "admin", "team": "T7"}

        r = client.post("/api/auth/login", json={"idToken": "tok", "turnstileToken": "ts"})

        assert r.status_code == 200
        assert r.json() == {
            "success": True,
            "user": {"uid": "a1", "role": "admin", "email": "a1@x.org", "team": "T7"},
        }
        set_cookie = r.headers["set-cookie"]
        assert "session=session-for-tok" in set_cookie
        assert "HttpOnly" in set_cookie
        assert "Max-Age=432000" in set_cookie
        assert "Path=/" in set_cookie
        assert "samesite=lax" in set_cookie.lower()
        assert fake_auth.last_expires_in == timedelta(days=5)

    def test_member_role_is_refused(self, client, fake_auth, monkeypatch):
        _turnstile(monkeypatch, ok=True)
        fake_auth.id_tokens["tok"] = {"uid": "m1", "role": "member", "team": "T7"}

        r = client.post("/api/auth/login", json={"idToken": "tok", "turnstileToken": "ts"})

        assert r.status_code == 403
        assert "set-cookie" not in r.headers

    def test_missing_captcha_is_distinct_from_bad_credentials(self, client, fake_auth, monkeypatch):
        calls = _turnstile(monkeypatch, ok=True)
        r = client.post("/api/auth/login", json={"idToken": "tok"})
        assert r.status_code == 400
        assert r.json() == {"error": "Captcha verification required"}
        assert calls == []

    def test_failed_captcha(self, client, fake_auth, monkeypatch):
        _turnstile(monkeypatch, ok=False)
        fake_auth.id_tokens["tok"] = {"uid": "a1", "role": "admin"}
        r = client.post("/api/auth/login", json={"idToken": "tok", "turnstileToken": "bad"})
        assert r.status_code == 400
        assert r.json() == {"error": "Captcha verification failed"}

    def test_debug_mode_skips_captcha(self, client, fake_auth, monkeypatch):
        calls = _turnstile(monkeypatch, ok=False)
        monkeypatch.setattr(settings, "debug", True)
        fake_auth.id_tokens["tok"] = {"uid": "x1", "role": "master"}

        r = client.post("/api/auth/login", json={"idToken": "tok"})

        assert r.status_code == 200
        assert r.json()["user"]["role"] == "master"
        assert calls == []

    def test_invalid_id_token(self, client, fake_auth, monkeypatch):
        _turnstile(monkeypatch, ok=True)
        r = client.post("/api/auth/login", json={"idToken": "forged", "turnstileToken": "ts"})
        assert r.status_code == 401
        assert r.json() == {"error": "Authentication failed"}

    def test_missing_credential(self, client):
        r = client.post("/api/auth/login", json={"turnstileToken": "ts"})
        assert r.status_code == 400
        assert r.json() == {"error": "Missing ID token"}

    def test_password_login_needs_web_api_key(self, client, monkeypatch):
        _turnstile(monkeypatch, ok=True)
        r = client.post(
            "/api/auth/login",
            json={"email": "a1@x.org", "password": "secret123", "turnstileToken": "ts"},
        )
        assert r.status_code == 400


class TestMe:
    def test_no_cookie_is_no_user(self, client):
        r = client.get("/api/auth/me")
        assert r.status_code == 200
        assert r.json() == {"user": None}

    def test_valid_session(self, as_user):
        r = as_user("a1", "admin", "T7").get("/api/auth/me")
        assert r.json()["user"] == {"uid": "a1", "role": "admin", "email": "a1@example.org", "team": "T7"}

    def test_garbage_cookie_is_no_user(self, client):
        client.cookies.set("session", "not-a-session")
        assert client.get("/api/auth/me").json() == {"user": None}


class TestRevocation:
    def test_revoked_session_is_no_user_and_401(self, as_user, fake_auth):
        c = as_user("a1", "admin", "T7")
        assert c.get("/api/teams").status_code == 200

        fake_auth.revoke_refresh_tokens("a1")

        assert c.get("/api/auth/me").json() == {"user": None}
        r = c.get("/api/teams")
        assert r.status_code == 401
        assert r.json() == {"error": "Unauthorized"}

    def test_disabled_account_loses_session(self, as_user, fake_auth):
        c = as_user("a1", "admin", "T7")
        fake_auth.users["a1"].disabled = True
        assert c.get("/api/matches/T7").status_code == 401

    def test_verify_session_tolerates_absence(self):
        assert session_gateway.verify_session(None) is None
        assert session_gateway.verify_session("") is None


class TestLogout:
    def test_logout_revokes_and_clears_cookie(self, as_user, fake_auth):
        c = as_user("a1", "admin", "T7")
        r = c.post("/api/auth/logout")
        assert r.status_code == 200
        assert r.json() == {"success": True}
        assert fake_auth.revoked == ["a1"]
        assert 'session=""' in r.headers["set-cookie"] or "Max-Age=0" in r.headers["set-cookie"]

    def test_logout_without_session(self, client, fake_auth):
        assert client.post("/api/auth/logout").status_code == 200
        assert fake_auth.revoked == []


def test_captcha_config(client, monkeypatch):
    monkeypatch.setattr(settings, "turnstile_site_key", "0x4AAA")
    assert client.get("/api/auth/captcha").json() == {"siteKey": "0x4AAA", "required": True}


def test_claims_to_principal_unknown_role_is_member():
    p = session_gateway.claims_to_principal({"uid": "u", "role": "owner", "team": 8020})
    assert p.role == "member"
    assert p.team == "8020"
