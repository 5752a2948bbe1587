"""
Pydantic schemas for Tag endpoints
"""

from pydantic import BaseModel

from fanhub.models.tag import TagBase
from fanhub.schemas.base import UTCDatetime


class TagResponse(TagBase):
    """Schema for tag response"""

    tag_id: int
    created_at: UTCDatetime

    model_config = {"from_attributes": True}


class TagListResponse(BaseModel):
    """Schema for tag list"""

    total: int
    tags: list[TagResponse]
