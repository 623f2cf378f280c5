"""
scout_admin/integrations/tba.py - The Blue Alliance (TBA) event lookup.

Read-only: fetches the current season's events (`/events/{season}/simple`),
drops offseason/preseason entries, sorts by name, and keeps the result in
memory for TBA_CACHE_SECONDS. Used only to fill the "add event" picker.
"""
import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import httpx

from scout_admin.config import settings
from scout_admin.core.constants import SEASON, TBA_CACHE_SECONDS, TBA_EXCLUDED_EVENT_TYPES
from scout_admin.core.errors import LookupFailed, UpstreamFailure

logger = logging.getLogger("scout.tba")

TBA_BASE_URL = "https://www.thebluealliance.com/api/v3"

# (fetched_at monotonic seconds, events)
_cache: Optional[Tuple[float, List[Dict[str, Any]]]] = None


def _to_event(e: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "key": str(e["key"]),
        "name": str(e.get("name") or ""),
        "code": str(e["key"]),
        "city": e.get("city"),
        "state": e.get("state_prov"),
        "country": e.get("country"),
        "startDate": e.get("start_date"),
        "endDate": e.get("end_date"),
    }


def shape_events(raw: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    events = [
        _to_event(e) for e in raw
        if isinstance(e, dict) and e.get("key") and e.get("event_type") not in TBA_EXCLUDED_EVENT_TYPES
    ]
    events.sort(key=lambda e: e["name"].casefold())
    return events


def clear_cache() -> None:
    global _cache
    _cache = None


async def fetch_season_events() -> List[Dict[str, Any]]:
    global _cache
    if not settings.tba_api_key:
        raise UpstreamFailure("TBA API key not configured")

    now = time.monotonic()
    if _cache is not None and now - _cache[0] < TBA_CACHE_SECONDS:
        return _cache[1]

    url = f"{TBA_BASE_URL}/events/{SEASON}/simple"
    try:
        async with httpx.AsyncClient(timeout=15) as client:
            resp = await client.get(url, headers={"X-TBA-Auth-Key": settings.tba_api_key})
    except httpx.HTTPError as exc:
        logger.exception("TBA request failed")
        raise LookupFailed("Failed to fetch events from TBA") from exc

    if resp.status_code != 200:
        logger.error("TBA API error: %s %s", resp.status_code, resp.text[:500])
        raise LookupFailed("Failed to fetch events from TBA")

    try:
        raw = resp.json()
    except ValueError as exc:
        logger.error("TBA returned a non-JSON body")
        raise LookupFailed("Failed to fetch events from TBA") from exc
    if not isinstance(raw, list):
        logger.error("TBA returned unexpected payload type %s", type(raw).__name__)
        raise LookupFailed("Failed to fetch events from TBA")

    events = shape_events(raw)
    _cache = (now, events)
    return events
