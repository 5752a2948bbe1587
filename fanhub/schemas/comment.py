"""
Pydantic schemas for Comment endpoints
"""

from pydantic import BaseModel, Field, field_validator

from fanhub.models.comment import CommentBase
from fanhub.schemas.base import UTCDatetime
from fanhub.schemas.common import UserSummary


class CommentCreate(BaseModel):
    """Schema for creating a new comment"""

    content: str = Field(min_length=1, max_length=10000, description="Comment text")

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        """Trim whitespace; whitespace-only comments are rejected."""
        v = v.strip()
        if not v:
            raise ValueError("Comment cannot be empty")
        return v


class CommentResponse(CommentBase):
    """
    Schema for comment response - what API returns.

    Inherits public fields from CommentBase and embeds the author summary.
    """

    comment_id: int
    fanwork_id: int
    user_id: int
    created_at: UTCDatetime
    user: UserSummary | None = None

    model_config = {"from_attributes": True}


class CommentListResponse(BaseModel):
    """Schema for comment list of a fanwork"""

    total: int
    comments: list[CommentResponse]
