"""
scout_admin/schemas/principal.py
Roles and the Principal model (the verified caller).
"""
from typing import Literal, Optional
from pydantic import BaseModel, Field

Role = Literal["member", "admin", "master"]


class Principal(BaseModel):
    uid: str = Field(..., description="Firebase UID")
    role: Role = Field("member", description="member | admin | master (custom claim)")
    email: Optional[str] = Field(None, description="E-mail (if any)")
    team: Optional[str] = Field(None, description="Team id (custom claim)")

    @property
    def is_master(self) -> bool:
        return self.role == "master"


class MeResponse(BaseModel):
    user: Optional[Principal] = None
