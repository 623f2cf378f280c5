"""
scout_admin/repositories/matches.py - Per-team event map in the `matches` collection.

Document `matches/{teamId}`:
    {
      "event": "2026_Central_Illinois_Regional",       # active event (reserved key)
      "2026_Central_Illinois_Regional": "2026ilpe",    # event key -> TBA code
      "2026_Week_0": "",
      ...
    }

Only keys starting with the season prefix are events. Writes that depend on what
is already in the document (add/update/delete) run inside a Firestore transaction,
so the quota count and the write it guards see the same document.
"""
import re
from typing import Any, Dict, List, Optional, Tuple

from google.cloud import firestore as gcf

from scout_admin.config import get_db
from scout_admin.core.constants import CURRENT_EVENT_FIELD, EVENT_KEY_PREFIX, SEASON_PREFIX
from scout_admin.core.errors import Conflict, NotFound, QuotaExceeded
from scout_admin.repositories import teams as teams_repo

COL = "matches"

_WHITESPACE = re.compile(r"\s+")


def event_key(name: str) -> str:
    """
    New event name -> storage key: season prefix + whitespace runs as `_`.
    Only used when adding; existing events are addressed by their stored key.
    """
    return EVENT_KEY_PREFIX + _WHITESPACE.sub("_", name.strip())


def is_event_key(key: str) -> bool:
    return key != CURRENT_EVENT_FIELD and key.startswith(SEASON_PREFIX)


def season_event_keys(data: Dict[str, Any]) -> List[str]:
    return [k for k in data if is_event_key(k)]


def _run_in_transaction(db, fn):
    """Run fn(transaction) in a Firestore transaction (retried by the client on contention)."""
    return gcf.transactional(fn)(db.transaction())


def _doc(db, team_id: str):
    return db.collection(COL).document(team_id)


def list_events(team_id: str) -> Tuple[Optional[str], List[Dict[str, Any]]]:
    snap = _doc(get_db(), team_id).get()
    if not snap.exists:
        return None, []
    data = snap.to_dict() or {}
    current = data.get(CURRENT_EVENT_FIELD) or None
    events = [
        {"name": k, "code": str(data[k]) if data[k] is not None else "", "isCurrent": current == k}
        for k in season_event_keys(data)
    ]
    events.sort(key=lambda e: e["name"])
    return current, events


def add_event(team_id: str, key: str, tba_code: str, enforce_quota: bool = True) -> None:
    """
    Add `key` to the team's event map.

    Quota is checked before the duplicate check; a caller that skips the quota
    is still refused a duplicate key.
    """
    db = get_db()
    team_ref = db.collection(teams_repo.COL).document(team_id)
    match_ref = _doc(db, team_id)

    def _add(transaction):
        team_snap = team_ref.get(transaction=transaction)
        match_snap = match_ref.get(transaction=transaction)
        team_data = (team_snap.to_dict() or {}) if team_snap.exists else {}
        match_data = (match_snap.to_dict() or {}) if match_snap.exists else {}

        if enforce_quota:
            quota = teams_repo.event_quota_of(team_data)
            if len(season_event_keys(match_data)) >= quota:
                raise QuotaExceeded(quota)

        if key in match_data:
            raise Conflict("Event already exists")

        transaction.set(match_ref, {key: tba_code or ""}, merge=True)

    _run_in_transaction(db, _add)


def update_event(team_id: str, key: str, tba_code: str) -> None:
    """Set the TBA code of an existing event."""
    db = get_db()
    match_ref = _doc(db, team_id)

    def _update(transaction):
        snap = match_ref.get(transaction=transaction)
        if not snap.exists or key not in (snap.to_dict() or {}):
            raise NotFound("Event not found")
        transaction.set(match_ref, {key: tba_code or ""}, merge=True)

    _run_in_transaction(db, _update)


def delete_event(team_id: str, key: str) -> None:
    db = get_db()
    match_ref = _doc(db, team_id)

    def _delete(transaction):
        snap = match_ref.get(transaction=transaction)
        if not snap.exists or key not in (snap.to_dict() or {}):
            raise NotFound("Event not found")
        transaction.set(match_ref, {key: gcf.DELETE_FIELD}, merge=True)

    _run_in_transaction(db, _delete)
