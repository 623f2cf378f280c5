# scout_admin/schemas/team.py
from typing import List, Optional
from pydantic import BaseModel, Field

# ---------- input ----------
class TeamCreate(BaseModel):
    """Master => new team. `name` and `number` are checked in the router so the 400 names both."""
    name: Optional[str] = Field(None, description="Team name")
    number: Optional[int] = Field(None, description="FRC team number")
    serial: Optional[str] = Field(None, description="Licence serial")
    serialQuantity: Optional[int] = Field(None, ge=0)
    eventQuota: Optional[int] = Field(None, ge=0, description="Max season events (0/missing -> 1)")

class TeamUpdate(BaseModel):
    """Optional fields; only the ones sent are written."""
    name: Optional[str] = None
    serial: Optional[str] = None
    serialQuantity: Optional[int] = Field(None, ge=0)
    eventQuota: Optional[int] = Field(None, ge=0)

# ---------- output ----------
class TeamOut(BaseModel):
    id: str
    name: str = ""
    number: int = 0
    serial: str = ""
    serialQuantity: int = 0
    eventQuota: int = 1
    createdAt: Optional[str] = None

class TeamListResponse(BaseModel):
    teams: List[TeamOut]

class TeamCreateResponse(BaseModel):
    success: bool = True
    team: TeamOut
