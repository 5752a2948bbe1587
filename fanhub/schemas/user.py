"""
Pydantic schemas for User endpoints
"""

from pydantic import BaseModel, Field, field_validator

from fanhub.models.user import UserBase
from fanhub.schemas.base import UTCDatetime, UTCDatetimeOptional


class UserResponse(UserBase):
    """
    Public user profile - what other users see.

    Inherits public fields from UserBase. Email, ban details and age
    verification state are not included.
    """

    user_id: int
    is_banned: bool = False
    created_at: UTCDatetime

    model_config = {"from_attributes": True}


class UserPrivateResponse(UserResponse):
    """Profile of the authenticated user, including private account state."""

    email: str
    is_active: bool
    age_verified: bool
    age_verified_at: UTCDatetimeOptional = None
    ban_reason: str | None = None


class UserUpdate(BaseModel):
    """Schema for self-service profile updates; all fields optional."""

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    profile_image_url: str | None = Field(default=None, max_length=500)

    @field_validator("first_name", "last_name", "profile_image_url")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        """Trim whitespace; empty strings clear the field."""
        if v is None:
            return None
        v = v.strip()
        return v or None


class UserModerationResponse(UserPrivateResponse):
    """User as seen by moderators, including ban bookkeeping."""

    banned_at: UTCDatetimeOptional = None
    banned_by: int | None = None
