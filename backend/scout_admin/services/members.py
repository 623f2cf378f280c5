"""
scout_admin/services/members.py - Team members as Firebase Auth accounts.

A member is not stored in Firestore: it is an Auth account whose custom claims
carry `team` and `role`. Listing a team therefore means listing accounts and
filtering on the `team` claim (one page of MEMBER_PAGE_SIZE accounts).
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from scout_admin.core.constants import MEMBER_PAGE_SIZE
from scout_admin.core.errors import NotFound, UpstreamFailure
from scout_admin.core.session import revoke_sessions

logger = logging.getLogger("scout.members")


def team_of(user: firebase_auth.UserRecord) -> Optional[str]:
    team = (user.custom_claims or {}).get("team")
    return str(team) if team not in (None, "") else None


def _created_at(user: firebase_auth.UserRecord) -> Optional[datetime]:
    meta = user.user_metadata
    ts = getattr(meta, "creation_timestamp", None) if meta else None
    if not ts:
        return None
    return datetime.fromtimestamp(ts / 1000, tz=timezone.utc)


def to_member(user: firebase_auth.UserRecord) -> Dict[str, Any]:
    claims = user.custom_claims or {}
    return {
        "uid": user.uid,
        "email": user.email or "",
        "displayName": user.display_name or "",
        "role": claims.get("role") or "member",
        "disabled": bool(user.disabled),
        "emailVerified": bool(user.email_verified),
        "createdAt": _created_at(user),
    }


def list_team_members(team_id: str) -> List[Dict[str, Any]]:
    try:
        page = firebase_auth.list_users(max_results=MEMBER_PAGE_SIZE)
    except firebase_exceptions.FirebaseError as exc:
        logger.exception("list_users failed")
        raise UpstreamFailure("Failed to fetch members") from exc
    return [to_member(u) for u in page.users if team_of(u) == team_id]


def get_account(uid: str) -> firebase_auth.UserRecord:
    try:
        return firebase_auth.get_user(uid)
    except firebase_auth.UserNotFoundError as exc:
        raise NotFound("Member not found") from exc
    except firebase_exceptions.FirebaseError as exc:
        logger.exception("get_user(%s) failed", uid)
        raise UpstreamFailure("Failed to fetch member") from exc


def update_member(
    user: firebase_auth.UserRecord,
    display_name: Optional[str] = None,
    disabled: Optional[bool] = None,
    role: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Apply the requested changes to an already-authorized target account.
    A role change revokes the account's sessions so the old claims stop working.
    """
    uid = user.uid
    updates: Dict[str, Any] = {}
    if display_name is not None:
        updates["display_name"] = display_name
    if disabled is not None:
        updates["disabled"] = disabled

    try:
        if updates:
            firebase_auth.update_user(uid, **updates)
        if role is not None:
            claims = dict(user.custom_claims or {})
            claims["role"] = role
            firebase_auth.set_custom_user_claims(uid, claims)
            revoke_sessions(uid)
        return to_member(firebase_auth.get_user(uid))
    except firebase_auth.UserNotFoundError as exc:
        raise NotFound("Member not found") from exc
    except firebase_exceptions.FirebaseError as exc:
        logger.exception("update of member %s failed", uid)
        raise UpstreamFailure("Failed to update member") from exc


def delete_member(uid: str) -> None:
    try:
        firebase_auth.delete_user(uid)
    except firebase_auth.UserNotFoundError as exc:
        raise NotFound("Member not found") from exc
    except firebase_exceptions.FirebaseError as exc:
        logger.exception("delete of member %s failed", uid)
        raise UpstreamFailure("Failed to delete member") from exc
