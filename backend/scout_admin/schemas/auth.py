# scout_admin/schemas/auth.py
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from scout_admin.schemas.principal import Principal


class LoginRequest(BaseModel):
    """Either `idToken` (client-side Firebase sign-in) or `email` + `password`."""
    idToken: Optional[str] = Field(None, description="Firebase ID token")
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    turnstileToken: Optional[str] = Field(None, description="Cloudflare Turnstile token")


class LoginResponse(BaseModel):
    success: bool = True
    user: Principal


class CaptchaConfig(BaseModel):
    siteKey: str = ""
    required: bool = True


class SuccessResponse(BaseModel):
    success: bool = True
