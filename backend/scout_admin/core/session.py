"""
# `scout_admin/core/session.py` — Session / Identity Gateway

Wraps Firebase Authentication for the cookie-based admin session.

## Flow
1. The browser signs in with the Firebase client SDK and posts its **ID token**
   (or e-mail + password, proxied through the Firebase REST API when
   `FIREBASE_WEB_API_KEY` is set) to `POST /api/auth/login`.
2. `verify_login_token` decodes the ID token; its custom claims must carry
   `role` = `admin` or `master`.
3. `create_session` mints a Firebase **session cookie** valid for 5 days, stored
   as the `session` cookie (httpOnly, sameSite=lax, secure in production).
4. Every later request goes through `verify_session`, which re-verifies the
   cookie with `check_revoked=True`: revoked refresh tokens and disabled
   accounts invalidate the session before it expires.

Custom claims on the account: `{"role": "member" | "admin" | "master", "team": "<team id>"}`.
"""
import logging
from typing import Optional

import httpx
from fastapi import Response
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from scout_admin.config import settings
from scout_admin.core.constants import (
    LOGIN_ROLES,
    ROLES,
    SESSION_COOKIE_NAME,
    SESSION_MAX_AGE_SECONDS,
    SESSION_TTL,
)
from scout_admin.core.errors import AuthenticationFailed, Forbidden, UpstreamFailure, ValidationFailed
from scout_admin.schemas.principal import Principal

logger = logging.getLogger("scout.auth")

FIREBASE_SIGNIN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"


def claims_to_principal(decoded: dict) -> Principal:
    """Decoded token / cookie claims -> Principal. Unknown roles count as `member`."""
    uid = decoded.get("uid") or decoded.get("user_id") or decoded.get("sub")
    role = decoded.get("role")
    if role not in ROLES:
        role = "member"
    team = decoded.get("team")
    return Principal(
        uid=uid,
        role=role,
        email=decoded.get("email"),
        team=str(team) if team not in (None, "") else None,
    )


def verify_session(session_cookie: Optional[str]) -> Optional[Principal]:
    """
    Session cookie -> Principal, or None ("no user").
    Missing, malformed, expired, revoked or disabled-account cookies all give None.
    """
    if not session_cookie:
        return None
    try:
        decoded = firebase_auth.verify_session_cookie(session_cookie, check_revoked=True)
    except firebase_auth.RevokedSessionCookieError:
        logger.info("Session cookie revoked")
        return None
    except firebase_auth.ExpiredSessionCookieError:
        logger.info("Session cookie expired")
        return None
    except firebase_auth.UserDisabledError:
        logger.info("Session belongs to a disabled account")
        return None
    except (ValueError, firebase_exceptions.FirebaseError) as exc:
        logger.warning("Session verification failed: %s", exc)
        return None
    if not (decoded.get("uid") or decoded.get("sub")):
        return None
    return claims_to_principal(decoded)


async def sign_in_with_password(email: str, password: str) -> str:
    """Exchange e-mail + password for an ID token through the Firebase REST API."""
    if not settings.firebase_web_api_key:
        raise ValidationFailed("Missing ID token")

    payload = {"email": email, "password": password, "returnSecureToken": True}
    try:
        async with httpx.AsyncClient(timeout=10) as client:
            resp = await client.post(
                FIREBASE_SIGNIN_URL,
                params={"key": settings.firebase_web_api_key},
                json=payload,
            )
    except httpx.HTTPError as exc:
        logger.exception("Firebase sign-in request failed")
        raise UpstreamFailure("Authentication service unavailable") from exc

    if resp.status_code != 200:
        try:
            message = resp.json().get("error", {}).get("message", "")
        except ValueError:
            message = resp.text
        logger.info("Firebase password sign-in rejected: %s", message)
        raise AuthenticationFailed()
    return resp.json()["idToken"]


def verify_login_token(id_token: str) -> Principal:
    """Verify an ID token for login; only admin and master accounts get a session."""
    try:
        decoded = firebase_auth.verify_id_token(id_token, check_revoked=True)
    except (ValueError, firebase_exceptions.FirebaseError) as exc:
        logger.info("ID token rejected: %s", exc)
        raise AuthenticationFailed() from exc

    if decoded.get("role") not in LOGIN_ROLES:
        raise Forbidden("Unauthorized: Admin or Master access required")
    return claims_to_principal(decoded)


def create_session(id_token: str) -> str:
    try:
        return firebase_auth.create_session_cookie(id_token, expires_in=SESSION_TTL)
    except (ValueError, firebase_exceptions.FirebaseError) as exc:
        logger.warning("Session cookie creation failed: %s", exc)
        raise AuthenticationFailed() from exc


def revoke_sessions(uid: str) -> None:
    """Revoke refresh tokens: every session minted earlier for `uid` stops verifying."""
    try:
        firebase_auth.revoke_refresh_tokens(uid)
    except firebase_auth.UserNotFoundError:
        pass


def set_session_cookie(response: Response, session_cookie: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_cookie,
        max_age=SESSION_MAX_AGE_SECONDS,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
