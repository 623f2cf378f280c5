from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from google.api_core.exceptions import NotFound as FirestoreNotFound

from scout_admin.config import get_db
from scout_admin.core.constants import DEFAULT_EVENT_QUOTA
from scout_admin.core.errors import NotFound

COL = "teams"


def event_quota_of(data: Dict[str, Any]) -> int:
    """`eventQuota` of a team document; missing/null means the default."""
    quota = data.get("eventQuota")
    if quota is None:
        return DEFAULT_EVENT_QUOTA
    return int(quota)


def _to_out(team_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": team_id,
        "name": data.get("name") or "",
        "number": int(data.get("number") or 0),
        "serial": data.get("serial") or "",
        "serialQuantity": int(data.get("serialQuantity") or 0),
        "eventQuota": event_quota_of(data),
        "createdAt": data.get("createdAt"),
    }


def list_all() -> List[Dict[str, Any]]:
    return [_to_out(doc.id, doc.to_dict() or {}) for doc in get_db().collection(COL).stream()]


def get(team_id: str) -> Optional[Dict[str, Any]]:
    doc = get_db().collection(COL).document(team_id).get()
    return _to_out(doc.id, doc.to_dict() or {}) if doc.exists else None


def create(name: str, number: int, serial: str = "", serial_quantity: int = 0,
           event_quota: int = DEFAULT_EVENT_QUOTA) -> Dict[str, Any]:
    data = {
        "name": name,
        "number": int(number),
        "serial": serial or "",
        "serialQuantity": int(serial_quantity or 0),
        "eventQuota": int(event_quota or DEFAULT_EVENT_QUOTA),
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }
    _, ref = get_db().collection(COL).add(data)
    return _to_out(ref.id, data)


def update(team_id: str, patch: Dict[str, Any]) -> None:
    try:
        get_db().collection(COL).document(team_id).update(patch)
    except FirestoreNotFound as exc:
        raise NotFound("Team not found") from exc
