"""
scout_admin/schemas/member.py
Team members are Firebase Auth accounts; these models are their API view.
"""
from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

MemberRole = Literal["member", "admin"]


class MemberOut(BaseModel):
    uid: str
    email: str = ""
    displayName: str = ""
    role: str = "member"
    disabled: bool = False
    emailVerified: bool = False
    createdAt: Optional[datetime] = None


class MemberListResponse(BaseModel):
    members: List[MemberOut]


class MemberUpdate(BaseModel):
    displayName: Optional[str] = Field(None, description="New display name")
    disabled: Optional[bool] = Field(None, description="Disable / enable the account")
    role: Optional[MemberRole] = Field(None, description="member | admin")


class MemberUpdateResponse(BaseModel):
    success: bool = True
    member: MemberOut
