# scout_admin/routers/tba.py
from fastapi import APIRouter, Response

from scout_admin.core.constants import TBA_CACHE_SECONDS
from scout_admin.integrations import tba
from scout_admin.schemas.event import TbaEventListResponse

router = APIRouter(prefix="/api/tba", tags=["TBA"])


@router.get("/events", response_model=TbaEventListResponse, summary="Current-season TBA events")
async def list_tba_events(response: Response):
    """Public: feeds the event picker. Upstream failures surface as 502, never as an empty list."""
    events = await tba.fetch_season_events()
    response.headers["Cache-Control"] = f"public, max-age={TBA_CACHE_SECONDS}"
    return TbaEventListResponse(events=events)
