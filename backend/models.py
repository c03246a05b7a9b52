"""
Pydantic models for request/response validation.

Requests are validated at the boundary; a missing or blank required field is
turned into a 400 ValidationError by the handler in main.py before any
service code runs.
"""
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator


NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class GameHubBase(BaseModel):
    """Shared base: allows construction by Python name or alias."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


# ── Auth Models ─────────────────────────────────────────────────────

class RegisterRequest(GameHubBase):
    """Request model for account registration."""
    name: NonBlankStr = Field(..., max_length=100)
    email: NonBlankStr = Field(..., max_length=255)
    phone: Optional[str] = Field(default=None, max_length=30)
    # Passwords are taken verbatim (no stripping)
    password: str = Field(..., min_length=1)

    @field_validator("phone")
    @classmethod
    def blank_phone_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class LoginRequest(GameHubBase):
    """Request model for login."""
    email: NonBlankStr
    password: str = Field(..., min_length=1)


class MessageResponse(GameHubBase):
    message: str


class TokenResponse(GameHubBase):
    token: str
    expires_in: int = Field(..., alias="expiresIn", description="Token lifetime in seconds")


class ProfileResponse(GameHubBase):
    """Public profile; the password hash is never part of it."""
    name: str
    email: str
    phone: Optional[str] = None


# ── Assistant Models ────────────────────────────────────────────────

class RecommendRequest(GameHubBase):
    user_message: NonBlankStr = Field(..., alias="userMessage", max_length=2000)


class SupportRequest(GameHubBase):
    message: NonBlankStr = Field(..., max_length=2000)


class ReplyResponse(GameHubBase):
    reply: str
