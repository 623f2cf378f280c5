"""Shared fixtures: in-memory Firestore, fake Firebase Auth, and a TestClient.

Nothing here talks to Google: repositories get a fake `get_db`, transactions
run inline, and `firebase_admin.auth` functions are monkeypatched per test.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any

import pytest
from fastapi.testclient import TestClient
from firebase_admin import auth as firebase_auth
from google.api_core.exceptions import NotFound
from google.cloud import firestore as gcf

from scout_admin.config import settings
from scout_admin.integrations import tba
from scout_admin.main import app
from scout_admin.repositories import matches as matches_repo
from scout_admin.repositories import teams as teams_repo


# ── Firestore ─────────────────────────────────────────────────────

class _FakeSnap:
    def __init__(self, doc_id: str, data: dict[str, Any] | None):
        self.id = doc_id
        self.exists = data is not None
        self._data = dict(data or {})

    def to_dict(self) -> dict[str, Any] | None:
        return dict(self._data) if self.exists else None


@dataclass
class _FakeDocRef:
    store: dict[str, dict[str, Any]]
    collection_name: str
    id: str

    @property
    def path(self) -> str:
        return f"{self.collection_name}/{self.id}"

    def get(self, transaction=None) -> _FakeSnap:  # noqa: ARG002
        return _FakeSnap(self.id, self.store.get(self.path))

    def set(self, data: dict[str, Any], merge: bool = False) -> None:  # noqa: FBT001,FBT002
        current = dict(self.store.get(self.path, {})) if merge else {}
        for k, v in data.items():
            if v is gcf.DELETE_FIELD:
                current.pop(k, None)
            else:
                current[k] = v
        self.store[self.path] = current

    def update(self, data: dict[str, Any]) -> None:
        if self.path not in self.store:
            raise NotFound(f"No document to update: {self.path}")
        self.set(data, merge=True)


@dataclass
class _FakeCollection:
    store: dict[str, dict[str, Any]]
    name: str
    ids: Any

    def document(self, doc_id: str) -> _FakeDocRef:
        return _FakeDocRef(self.store, self.name, doc_id)

    def add(self, data: dict[str, Any]):
        ref = self.document(f"auto{next(self.ids)}")
        ref.set(data)
        return None, ref

    def stream(self):
        prefix = f"{self.name}/"
        for path, data in list(self.store.items()):
            if path.startswith(prefix) and "/" not in path[len(prefix):]:
                yield _FakeSnap(path[len(prefix):], data)


class FakeFirestore:
    def __init__(self):
        self.store: dict[str, dict[str, Any]] = {}
        self._ids = itertools.count(1)
        self.transactions: list[_InlineTransaction] = []

    def transaction(self) -> _InlineTransaction:
        txn = _InlineTransaction()
        self.transactions.append(txn)
        return txn

    def collection(self, name: str) -> _FakeCollection:
        return _FakeCollection(self.store, name, self._ids)

    def doc(self, path: str) -> dict[str, Any] | None:
        return self.store.get(path)


class _InlineTransaction:
    """Applies writes immediately; `wrapped` names the function run through `transactional`."""

    def __init__(self):
        self.wrapped: list[str] = []

    def set(self, ref, data, merge=False):  # noqa: FBT002
        ref.set(data, merge=merge)


def _inline_transactional(fn):
    def run(transaction, *args, **kwargs):
        transaction.wrapped.append(fn.__name__)
        return fn(transaction, *args, **kwargs)

    return run


@pytest.fixture
def fake_db(monkeypatch) -> FakeFirestore:
    db = FakeFirestore()
    monkeypatch.setattr(teams_repo, "get_db", lambda: db)
    monkeypatch.setattr(matches_repo, "get_db", lambda: db)
    monkeypatch.setattr(matches_repo.gcf, "transactional", _inline_transactional)
    return db


# ── Firebase Auth ─────────────────────────────────────────────────

@dataclass
class _Meta:
    creation_timestamp: int | None = 1_767_225_600_000  # 2026-01-01T00:00:00Z


@dataclass
class FakeUser:
    uid: str
    email: str | None = None
    display_name: str | None = None
    custom_claims: dict[str, Any] | None = None
    disabled: bool = False
    email_verified: bool = True
    user_metadata: _Meta = field(default_factory=_Meta)


@dataclass
class _Page:
    users: list[FakeUser]


class FakeAuth:
    """Stands in for the firebase_admin.auth functions the app calls."""

    def __init__(self):
        self.users: dict[str, FakeUser] = {}
        self.sessions: dict[str, dict[str, Any]] = {}
        self.id_tokens: dict[str, dict[str, Any]] = {}
        self.revoked: list[str] = []
        self.deleted: list[str] = []
        self.list_calls: list[int] = []

    # accounts
    def add_user(self, uid: str, role: str = "member", team: str | None = None, **kw) -> FakeUser:
        claims: dict[str, Any] = {"role": role}
        if team is not None:
            claims["team"] = team
        user = FakeUser(uid=uid, email=kw.pop("email", f"{uid}@example.org"), custom_claims=claims, **kw)
        self.users[uid] = user
        return user

    def list_users(self, page_token=None, max_results=1000):  # noqa: ARG002
        self.list_calls.append(max_results)
        return _Page(users=list(self.users.values())[:max_results])

    def get_user(self, uid, app=None):  # noqa: ARG002
        if uid not in self.users:
            raise firebase_auth.UserNotFoundError(f"No user record found for the provided user ID: {uid}")
        return self.users[uid]

    def update_user(self, uid, **kwargs):
        user = self.get_user(uid)
        for k, v in kwargs.items():
            setattr(user, k, v)
        return user

    def set_custom_user_claims(self, uid, custom_claims, app=None):  # noqa: ARG002
        self.get_user(uid).custom_claims = dict(custom_claims)

    def delete_user(self, uid, app=None):  # noqa: ARG002
        self.get_user(uid)
        del self.users[uid]
        self.deleted.append(uid)

    def revoke_refresh_tokens(self, uid, app=None):  # noqa: ARG002
        self.revoked.append(uid)
        # Sessions of this uid no longer verify
        for cookie, claims in list(self.sessions.items()):
            if claims.get("uid") == uid:
                claims["_revoked"] = True

    # tokens / sessions
    def verify_session_cookie(self, session_cookie, check_revoked=False, app=None):  # noqa: ARG002
        claims = self.sessions.get(session_cookie)
        if claims is None:
            raise firebase_auth.InvalidSessionCookieError("Invalid session cookie")
        if check_revoked and claims.get("_revoked"):
            raise firebase_auth.RevokedSessionCookieError("The Firebase session cookie has been revoked.")
        user = self.users.get(claims["uid"])
        if check_revoked and user is not None and user.disabled:
            raise firebase_auth.UserDisabledError("The user record is disabled.")
        return {k: v for k, v in claims.items() if not k.startswith("_")}

    def verify_id_token(self, id_token, app=None, check_revoked=False, clock_skew_seconds=0):  # noqa: ARG002
        claims = self.id_tokens.get(id_token)
        if claims is None:
            raise firebase_auth.InvalidIdTokenError("Invalid ID token")
        return dict(claims)

    def create_session_cookie(self, id_token, expires_in, app=None):  # noqa: ARG002
        cookie = f"session-for-{id_token}"
        self.sessions[cookie] = dict(self.id_tokens[id_token])
        self.last_expires_in = expires_in
        return cookie

    # helpers
    def session_for(self, uid: str, role: str, team: str | None = None) -> str:
        if uid not in self.users:
            self.add_user(uid, role=role, team=team)
        claims: dict[str, Any] = {"uid": uid, "email": f"{uid}@example.org", "role": role}
        if team is not None:
            claims["team"] = team
        cookie = f"cookie-{uid}"
        self.sessions[cookie] = claims
        return cookie

    def install(self, monkeypatch) -> None:
        for name in (
            "list_users", "get_user", "update_user", "set_custom_user_claims", "delete_user",
            "revoke_refresh_tokens", "verify_session_cookie", "verify_id_token", "create_session_cookie",
        ):
            monkeypatch.setattr(firebase_auth, name, getattr(self, name))


@pytest.fixture
def fake_auth(monkeypatch) -> FakeAuth:
    fa = FakeAuth()
    fa.install(monkeypatch)
    return fa


# ── App ───────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def _reset_state(monkeypatch):
    monkeypatch.setattr(settings, "debug", False)
    monkeypatch.setattr(settings, "tba_api_key", "")
    monkeypatch.setattr(settings, "turnstile_secret_key", "")
    monkeypatch.setattr(settings, "firebase_web_api_key", "")
    tba.clear_cache()
    yield
    tba.clear_cache()


@pytest.fixture
def client(fake_db, fake_auth) -> TestClient:
    return TestClient(app)


@pytest.fixture
def as_user(client, fake_auth):
    """as_user(uid, role, team) -> the client, now carrying that user's session cookie."""

    def _login(uid: str, role: str, team: str | None = None) -> TestClient:
        client.cookies.set("session", fake_auth.session_for(uid, role, team))
        return client

    return _login
