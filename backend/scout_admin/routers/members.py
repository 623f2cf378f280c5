"""
# scout_admin/routers/members.py — Team members

- `GET /api/teams/{teamId}/members` — master, or any caller of that team.
- `PATCH /api/teams/{teamId}/members/{uid}` — same-team caller; displayName,
  disabled, role (`member` | `admin`). Own `disabled` / `role` cannot be changed.
- `DELETE /api/teams/{teamId}/members/{uid}` — same-team caller, never themself.

Every rule for the requested change is checked before anything is written.
"""
import logging

from fastapi import APIRouter, Depends

from scout_admin.core import policy
from scout_admin.core.errors import ValidationFailed
from scout_admin.core.policy import Action
from scout_admin.core.security import get_current_principal
from scout_admin.schemas.auth import SuccessResponse
from scout_admin.schemas.member import (
    MemberListResponse, MemberOut, MemberUpdate, MemberUpdateResponse,
)
from scout_admin.schemas.principal import Principal
from scout_admin.services import members as members_svc

logger = logging.getLogger("scout.members")

router = APIRouter(prefix="/api/teams/{team_id}/members", tags=["Members"])


@router.get("", response_model=MemberListResponse, summary="List team members")
def list_members(team_id: str, principal: Principal = Depends(get_current_principal)):
    policy.enforce(Action.LIST_MEMBERS, principal, team_id)
    return MemberListResponse(members=members_svc.list_team_members(team_id))


@router.patch("/{uid}", response_model=MemberUpdateResponse, summary="Update a member")
def update_member(
    team_id: str,
    uid: str,
    payload: MemberUpdate,
    principal: Principal = Depends(get_current_principal),
):
    actions = []
    if payload.displayName is not None:
        actions.append(Action.RENAME_MEMBER)
    if payload.disabled is not None:
        actions.append(Action.SET_MEMBER_DISABLED)
    if payload.role is not None:
        actions.append(Action.SET_MEMBER_ROLE)
    if not actions:
        raise ValidationFailed("No fields to update")

    # Caller-side rules first: nothing about the target leaks to other teams
    for action in actions:
        policy.enforce(action, principal, team_id, target_uid=uid)

    target = members_svc.get_account(uid)
    for action in actions:
        policy.enforce(action, principal, team_id, target_uid=uid, target_team=members_svc.team_of(target))

    member = members_svc.update_member(
        target,
        display_name=payload.displayName,
        disabled=payload.disabled,
        role=payload.role,
    )
    logger.info("Member %s of team %s updated by %s (%s)",
                uid, team_id, principal.uid, ", ".join(a.value for a in actions))
    return MemberUpdateResponse(member=MemberOut(**member))


@router.delete("/{uid}", response_model=SuccessResponse, summary="Delete a member")
def delete_member(team_id: str, uid: str, principal: Principal = Depends(get_current_principal)):
    policy.enforce(Action.DELETE_MEMBER, principal, team_id, target_uid=uid)

    target = members_svc.get_account(uid)
    policy.enforce(Action.DELETE_MEMBER, principal, team_id, target_uid=uid,
                   target_team=members_svc.team_of(target))

    members_svc.delete_member(uid)
    logger.info("Member %s of team %s deleted by %s", uid, team_id, principal.uid)
    return SuccessResponse()
