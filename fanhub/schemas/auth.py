"""
Authentication schemas for request/response validation.

This module defines Pydantic models for authentication-related API operations:
- User registration
- Login credentials
- Token responses
- Age confirmation
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from fanhub.schemas.user import UserPrivateResponse


class RegisterRequest(BaseModel):
    """Request schema for user registration."""

    email: EmailStr
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=6, max_length=255)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Usernames are trimmed and may not contain whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Username cannot be empty")
        if any(ch.isspace() for ch in v):
            raise ValueError("Username cannot contain whitespace")
        return v


class LoginRequest(BaseModel):
    """Request schema for user login."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=255)


class TokenResponse(BaseModel):
    """Response schema for successful registration or login."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration time in seconds from now")
    user: UserPrivateResponse


class AgeConfirmationRequest(BaseModel):
    """Request schema for self-attested age confirmation."""

    confirmed: bool = Field(..., description="Caller confirms they are 18 or older")
