"""
scout_admin/core/policy.py - Authorization guard.

One decision function for every role-aware action, so that each handler asks
the same question the same way:

    check(action, principal, team_id, target_uid=None, target_team=...) -> AppError | None

`allow(...)` is the boolean form, `enforce(...)` raises the returned error.
Authentication happens before any of this (see `core/security.py`); these
functions always receive a verified Principal.

| Action              | Rule                                                              |
|---------------------|-------------------------------------------------------------------|
| READ_TEAM           | master OR caller.team == team                                     |
| LIST_MEMBERS        | master OR caller.team == team                                     |
| MANAGE_TEAMS        | master                                                            |
| DELETE_TEAM         | never (405)                                                       |
| ADD_EVENT           | master OR (caller.team == team AND admin); quota: see quota_applies |
| EDIT_EVENT          | same as ADD_EVENT, no quota                                       |
| DELETE_MEMBER       | caller.team == team AND target.team == team AND target != caller  |
| RENAME_MEMBER       | caller.team == team                                               |
| SET_MEMBER_DISABLED | caller.team == team AND target != caller                          |
| SET_MEMBER_ROLE     | caller.team == team AND target != caller                          |
"""
import logging
from enum import Enum
from typing import Any, Optional

from scout_admin.core.errors import AppError, Forbidden, MethodNotAllowed, SelfProtection
from scout_admin.schemas.principal import Principal

logger = logging.getLogger("scout.policy")

# target_team not supplied yet (target account not loaded)
_UNLOADED: Any = object()


class Action(str, Enum):
    READ_TEAM = "team:read"
    LIST_MEMBERS = "members:list"
    MANAGE_TEAMS = "teams:manage"
    DELETE_TEAM = "team:delete"
    ADD_EVENT = "event:add"
    EDIT_EVENT = "event:edit"
    DELETE_MEMBER = "member:delete"
    RENAME_MEMBER = "member:rename"
    SET_MEMBER_DISABLED = "member:disable"
    SET_MEMBER_ROLE = "member:role"


_MEMBER_ACTIONS = {
    Action.DELETE_MEMBER,
    Action.RENAME_MEMBER,
    Action.SET_MEMBER_DISABLED,
    Action.SET_MEMBER_ROLE,
}

_SELF_PROTECTED = {
    Action.DELETE_MEMBER: "Cannot delete yourself",
    Action.SET_MEMBER_DISABLED: "Cannot disable yourself",
    Action.SET_MEMBER_ROLE: "Cannot change your own role",
}


def _role_rule(action: Action, principal: Principal, team_id: Optional[str]) -> bool:
    own_team = team_id is not None and principal.team == team_id

    if action in (Action.READ_TEAM, Action.LIST_MEMBERS):
        return principal.is_master or own_team
    if action is Action.MANAGE_TEAMS:
        return principal.is_master
    if action in (Action.ADD_EVENT, Action.EDIT_EVENT):
        return principal.is_master or (own_team and principal.role == "admin")
    if action in _MEMBER_ACTIONS:
        # No master override: members are managed from inside their team only
        return own_team
    return False


def check(
    action: Action,
    principal: Principal,
    team_id: Optional[str] = None,
    target_uid: Optional[str] = None,
    target_team: Optional[str] = _UNLOADED,
) -> Optional[AppError]:
    """
    Return the error the caller should get, or None when the action is allowed.

    For member actions pass `target_uid`; pass `target_team` (the target's team
    claim, None when it has none) once the target account has been loaded.
    Before that, only the caller-side rules are evaluated.
    """
    if action is Action.DELETE_TEAM:
        return MethodNotAllowed("Deleting teams is not allowed")

    if not _role_rule(action, principal, team_id):
        logger.debug("deny %s uid=%s role=%s team=%s -> %s",
                     action.value, principal.uid, principal.role, principal.team, team_id)
        return Forbidden()

    if action in _SELF_PROTECTED and target_uid is not None and target_uid == principal.uid:
        return SelfProtection(_SELF_PROTECTED[action])

    if action in _MEMBER_ACTIONS and target_team is not _UNLOADED and target_team != team_id:
        return Forbidden()

    return None


def allow(
    action: Action,
    principal: Principal,
    team_id: Optional[str] = None,
    target_uid: Optional[str] = None,
    target_team: Optional[str] = _UNLOADED,
) -> bool:
    return check(action, principal, team_id, target_uid, target_team) is None


def enforce(
    action: Action,
    principal: Principal,
    team_id: Optional[str] = None,
    target_uid: Optional[str] = None,
    target_team: Optional[str] = _UNLOADED,
) -> None:
    error = check(action, principal, team_id, target_uid, target_team)
    if error is not None:
        raise error


def quota_applies(principal: Principal) -> bool:
    """Masters add events past a team's quota; everyone else is bound by it."""
    return not principal.is_master
