"""
# scout_admin/routers/matches.py — Team events

`/api/matches/{teamId}`:
- `GET`    — events of the team (season keys only) + the active event.
- `POST`   — `{eventName, tbaCode?}`; the name is stored as `2026_<Name_With_Underscores>`.
             Team admins are bound by the team's `eventQuota`; masters are not.
             Duplicate keys are refused for everyone.
- `DELETE` — `{eventName}` removes the event; `eventName` is the stored key as listed by `GET`.
- `PATCH`  — `{eventName, tbaCode}` changes the TBA code of an existing event (stored key).
"""
import logging

from fastapi import APIRouter, Depends
from google.api_core.exceptions import GoogleAPICallError

from scout_admin.core import policy
from scout_admin.core.errors import UpstreamFailure, ValidationFailed
from scout_admin.core.policy import Action
from scout_admin.core.security import get_current_principal
from scout_admin.repositories import matches as matches_repo
from scout_admin.schemas.auth import SuccessResponse
from scout_admin.schemas.event import (
    EventCreate, EventCreateResponse, EventDelete, EventListResponse, EventUpdate,
)
from scout_admin.schemas.principal import Principal

logger = logging.getLogger("scout.matches")

router = APIRouter(prefix="/api/matches", tags=["Events"])


def _required(event_name) -> str:
    if not event_name or not event_name.strip():
        raise ValidationFailed("Event name is required")
    return event_name


@router.get("/{team_id}", response_model=EventListResponse, summary="List team events")
def list_events(team_id: str, principal: Principal = Depends(get_current_principal)):
    policy.enforce(Action.READ_TEAM, principal, team_id)
    try:
        current, events = matches_repo.list_events(team_id)
    except GoogleAPICallError as exc:
        logger.exception("Get matches for %s failed", team_id)
        raise UpstreamFailure("Failed to fetch events") from exc
    return EventListResponse(currentEvent=current, events=events)


@router.post("/{team_id}", response_model=EventCreateResponse, summary="Add an event")
def add_event(team_id: str, payload: EventCreate, principal: Principal = Depends(get_current_principal)):
    policy.enforce(Action.ADD_EVENT, principal, team_id)
    key = matches_repo.event_key(_required(payload.eventName))
    tba_code = payload.tbaCode or ""

    try:
        matches_repo.add_event(team_id, key, tba_code, enforce_quota=policy.quota_applies(principal))
    except GoogleAPICallError as exc:
        logger.exception("Add event %s for %s failed", key, team_id)
        raise UpstreamFailure("Failed to add event") from exc

    logger.info("Event %s added to team %s by %s", key, team_id, principal.uid)
    return EventCreateResponse(eventName=key, tbaCode=tba_code)


@router.delete("/{team_id}", response_model=SuccessResponse, summary="Remove an event")
def delete_event(team_id: str, payload: EventDelete, principal: Principal = Depends(get_current_principal)):
    policy.enforce(Action.EDIT_EVENT, principal, team_id)
    key = _required(payload.eventName)

    try:
        matches_repo.delete_event(team_id, key)
    except GoogleAPICallError as exc:
        logger.exception("Delete event %s for %s failed", key, team_id)
        raise UpstreamFailure("Failed to delete event") from exc

    logger.info("Event %s removed from team %s by %s", key, team_id, principal.uid)
    return SuccessResponse()


@router.patch("/{team_id}", response_model=SuccessResponse, summary="Update an event's TBA code")
def update_event(team_id: str, payload: EventUpdate, principal: Principal = Depends(get_current_principal)):
    policy.enforce(Action.EDIT_EVENT, principal, team_id)
    key = _required(payload.eventName)

    try:
        matches_repo.update_event(team_id, key, payload.tbaCode or "")
    except GoogleAPICallError as exc:
        logger.exception("Update event %s for %s failed", key, team_id)
        raise UpstreamFailure("Failed to update event") from exc
    return SuccessResponse()
