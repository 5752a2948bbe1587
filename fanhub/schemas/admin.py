"""
Schemas for moderator and admin actions
"""

from pydantic import BaseModel, Field, field_validator

from fanhub.config import UserRole


class HideFanworkRequest(BaseModel):
    """Hide a fanwork from public view"""

    reason: str = Field(..., min_length=1, max_length=500)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Reason cannot be empty")
        return v


class BanUserRequest(BaseModel):
    """Ban a user account"""

    reason: str = Field(..., min_length=1, max_length=500)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Reason cannot be empty")
        return v


class RoleUpdateRequest(BaseModel):
    """Change a user's role (admin only)"""

    role: str

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: str) -> str:
        if v not in UserRole.VALUES:
            raise ValueError(f"role must be one of: {', '.join(sorted(UserRole.VALUES))}")
        return v


class AgeVerificationUpdate(BaseModel):
    """Set or clear a user's age verification"""

    age_verified: bool
