# scout_admin/schemas/event.py
from typing import List, Optional
from pydantic import BaseModel, Field


class EventOut(BaseModel):
    name: str = Field(..., description="Stored key, e.g. 2026_Central_Illinois_Regional")
    code: str = Field("", description="TBA event code (may be empty)")
    isCurrent: bool = False


class EventListResponse(BaseModel):
    currentEvent: Optional[str] = None
    events: List[EventOut]


class EventCreate(BaseModel):
    eventName: Optional[str] = None
    tbaCode: Optional[str] = None


class EventDelete(BaseModel):
    eventName: Optional[str] = None


class EventUpdate(BaseModel):
    eventName: Optional[str] = None
    tbaCode: Optional[str] = None


class EventCreateResponse(BaseModel):
    success: bool = True
    eventName: str
    tbaCode: str = ""


class TbaEventOut(BaseModel):
    key: str
    name: str
    code: str
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None


class TbaEventListResponse(BaseModel):
    events: List[TbaEventOut]
