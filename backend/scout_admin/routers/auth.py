"""
# scout_admin/routers/auth.py — Authentication

## POST /api/auth/login
Exchanges a Firebase credential + Turnstile token for the `session` cookie.

Body (JSON):
- idToken: Firebase ID token (or `email` + `password` when FIREBASE_WEB_API_KEY is set)
- turnstileToken: Cloudflare Turnstile token (ignored when DEBUG is on)

Steps:
1. Turnstile check (skipped in debug mode). Missing / rejected → 400.
2. Credential → ID token → claims. Rejected credential → 401.
3. `role` claim must be `admin` or `master` → otherwise 403.
4. 5-day session cookie is set; `{success, user}` returned.

## GET /api/auth/me
Current session → `{"user": {...}}`, or `{"user": null}` when there is none.

## POST /api/auth/logout
Revokes the caller's refresh tokens (if the session is valid) and clears the cookie.

## GET /api/auth/captcha
Turnstile site key for the login page.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from scout_admin.config import settings
from scout_admin.core import session as session_gateway
from scout_admin.core.errors import ValidationFailed
from scout_admin.core.security import get_optional_principal
from scout_admin.integrations import turnstile
from scout_admin.schemas.auth import CaptchaConfig, LoginRequest, LoginResponse, SuccessResponse
from scout_admin.schemas.principal import MeResponse, Principal

logger = logging.getLogger("scout.auth")

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse, summary="Exchange credential for a session cookie")
async def login(payload: LoginRequest, request: Request, response: Response):
    has_password = bool(payload.email and payload.password)
    if not payload.idToken and not has_password:
        raise ValidationFailed("Missing ID token")

    if not settings.debug:
        if not payload.turnstileToken:
            raise ValidationFailed("Captcha verification required")
        client_ip = request.client.host if request.client else None
        if not await turnstile.verify_token(payload.turnstileToken, client_ip):
            raise ValidationFailed("Captcha verification failed")

    id_token = payload.idToken
    if not id_token:
        id_token = await session_gateway.sign_in_with_password(payload.email, payload.password)

    user = session_gateway.verify_login_token(id_token)
    cookie = session_gateway.create_session(id_token)
    session_gateway.set_session_cookie(response, cookie)

    logger.info("Session created for uid=%s role=%s team=%s", user.uid, user.role, user.team)
    return LoginResponse(user=user)


@router.get("/me", response_model=MeResponse, summary="Current session claims")
def me(principal: Optional[Principal] = Depends(get_optional_principal)):
    return MeResponse(user=principal)


@router.post("/logout", response_model=SuccessResponse, summary="Revoke sessions and clear the cookie")
def logout(response: Response, principal: Optional[Principal] = Depends(get_optional_principal)):
    if principal is not None:
        try:
            session_gateway.revoke_sessions(principal.uid)
        except Exception:
            # The cookie is cleared regardless; the session expires on its own
            logger.exception("Refresh token revocation failed for uid=%s", principal.uid)
    session_gateway.clear_session_cookie(response)
    return SuccessResponse()


@router.get("/captcha", response_model=CaptchaConfig, summary="Turnstile settings for the login page")
def captcha_config():
    return CaptchaConfig(siteKey=settings.turnstile_site_key, required=not settings.debug)
