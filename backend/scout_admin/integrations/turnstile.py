"""
scout_admin/integrations/turnstile.py - Cloudflare Turnstile bot-check verification.

The login page renders the Turnstile widget with `TURNSTILE_SITE_KEY`; the token it
produces is verified server-side against `siteverify` with `TURNSTILE_SECRET_KEY`.
"""
import logging

import httpx

from scout_admin.config import settings

logger = logging.getLogger("scout.turnstile")

SITEVERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"


async def verify_token(token: str, remote_ip: str | None = None) -> bool:
    """True only when Cloudflare confirms the token. Any failure counts as not verified."""
    if not settings.turnstile_secret_key:
        logger.error("TURNSTILE_SECRET_KEY not configured")
        return False

    form = {"secret": settings.turnstile_secret_key, "response": token}
    if remote_ip:
        form["remoteip"] = remote_ip

    try:
        async with httpx.AsyncClient(timeout=10) as client:
            resp = await client.post(SITEVERIFY_URL, data=form)
        data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Turnstile verification error: %s", e)
        return False

    if data.get("success") is not True:
        logger.info("Turnstile rejected token: %s", data.get("error-codes"))
        return False
    return True
