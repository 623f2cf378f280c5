"""
# scout_admin/routers/teams.py — Teams

- `GET /api/teams` — master: every team; others: their own team only (`[]` if the
  document is missing, 403 without a team claim).
- `POST /api/teams` — master only; `name` + `number` required.
- `PATCH /api/teams/{teamId}` — master only; name / serial / serialQuantity / eventQuota.
- `DELETE /api/teams/{teamId}` — never allowed (405), for every role.
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from google.api_core.exceptions import GoogleAPICallError

from scout_admin.core import policy
from scout_admin.core.errors import Forbidden, UpstreamFailure, ValidationFailed
from scout_admin.core.policy import Action
from scout_admin.core.security import get_current_principal
from scout_admin.repositories import teams as teams_repo
from scout_admin.schemas.auth import SuccessResponse
from scout_admin.schemas.principal import Principal
from scout_admin.schemas.team import (
    TeamCreate, TeamCreateResponse, TeamListResponse, TeamOut, TeamUpdate,
)

logger = logging.getLogger("scout.teams")

router = APIRouter(prefix="/api/teams", tags=["Teams"])


@router.get("", response_model=TeamListResponse, summary="Teams visible to the caller")
def list_teams(principal: Principal = Depends(get_current_principal)):
    try:
        if principal.is_master:
            return TeamListResponse(teams=teams_repo.list_all())

        if not principal.team:
            raise Forbidden("No team assigned")

        team = teams_repo.get(principal.team)
    except GoogleAPICallError as exc:
        logger.exception("Teams fetch failed")
        raise UpstreamFailure("Failed to fetch teams") from exc
    return TeamListResponse(teams=[team] if team else [])


@router.post("", response_model=TeamCreateResponse, summary="Create team (master)")
def create_team(payload: TeamCreate, principal: Principal = Depends(get_current_principal)):
    policy.enforce(Action.MANAGE_TEAMS, principal)

    if not payload.name or not payload.number:
        raise ValidationFailed("Name and number are required")

    try:
        team = teams_repo.create(
            name=payload.name,
            number=payload.number,
            serial=payload.serial or "",
            serial_quantity=payload.serialQuantity or 0,
            event_quota=payload.eventQuota,
        )
    except GoogleAPICallError as exc:
        logger.exception("Create team failed")
        raise UpstreamFailure("Failed to create team") from exc

    logger.info("Team %s (%s) created by %s", team["id"], team["number"], principal.uid)
    return TeamCreateResponse(team=TeamOut(**team))


@router.patch("/{team_id}", response_model=SuccessResponse, summary="Update team (master)")
def update_team(team_id: str, payload: TeamUpdate, principal: Principal = Depends(get_current_principal)):
    policy.enforce(Action.MANAGE_TEAMS, principal, team_id)

    patch: Dict[str, Any] = {}
    if payload.name:
        patch["name"] = payload.name
    if payload.serial is not None:
        patch["serial"] = payload.serial
    if payload.serialQuantity is not None:
        patch["serialQuantity"] = payload.serialQuantity
    if payload.eventQuota is not None:
        patch["eventQuota"] = payload.eventQuota

    if not patch:
        raise ValidationFailed("No fields to update")

    try:
        teams_repo.update(team_id, patch)
    except GoogleAPICallError as exc:
        logger.exception("Update team %s failed", team_id)
        raise UpstreamFailure("Failed to update team") from exc
    return SuccessResponse()


@router.delete("/{team_id}", summary="Delete team (always rejected)")
def delete_team(team_id: str, principal: Principal = Depends(get_current_principal)):
    policy.enforce(Action.DELETE_TEAM, principal, team_id)
