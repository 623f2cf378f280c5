"""
scout_admin/core/security.py - FastAPI dependencies for the cookie session.

- `get_optional_principal`: verified Principal, or None when there is no valid session.
- `get_current_principal`: same, but a missing/invalid session is a 401 before
  any authorization rule runs.

Use them with `Depends(...)` in routers, then ask `core.policy` about the action.
"""
from typing import Optional

from fastapi import Cookie, Depends

from scout_admin.core.constants import SESSION_COOKIE_NAME
from scout_admin.core.errors import Unauthenticated
from scout_admin.core.session import verify_session
from scout_admin.schemas.principal import Principal


def get_session_cookie(
    session: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME),
) -> Optional[str]:
    return session


def get_optional_principal(
    session_cookie: Optional[str] = Depends(get_session_cookie),
) -> Optional[Principal]:
    return verify_session(session_cookie)


def get_current_principal(
    principal: Optional[Principal] = Depends(get_optional_principal),
) -> Principal:
    if principal is None:
        raise Unauthenticated()
    return principal
