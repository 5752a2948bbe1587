"""
Shared/common Pydantic schemas used across multiple endpoints
"""

from pydantic import BaseModel


class UserSummary(BaseModel):
    """
    Minimal user information for embedding in responses.

    Used across fanwork and comment endpoints so clients can show the author
    without fetching the full user profile.
    """

    user_id: int
    username: str
    profile_image_url: str | None = None

    # Allow Pydantic to read from SQLModel attributes (not just dicts)
    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    """Generic response carrying a human-readable message."""

    message: str
