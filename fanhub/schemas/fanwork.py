"""
Pydantic schemas for Fanwork endpoints
"""

from pydantic import BaseModel, Field, field_validator

from fanhub.config import ContentRating, FanworkType, settings
from fanhub.models.fanwork import FanworkBase
from fanhub.schemas.base import UTCDatetime, UTCDatetimeOptional
from fanhub.schemas.common import UserSummary


def _check_type(v: str) -> str:
    if v not in FanworkType.VALUES:
        raise ValueError(f"type must be one of: {', '.join(sorted(FanworkType.VALUES))}")
    return v


def _check_rating(v: str) -> str:
    if v not in ContentRating.VALUES:
        raise ValueError(f"rating must be one of: {', '.join(sorted(ContentRating.VALUES))}")
    return v


class FanworkCreate(BaseModel):
    """Schema for creating a new fanwork"""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    type: str = Field(..., description="artwork, fanfiction or comic")
    rating: str = Field(default=ContentRating.ALL_AGES, description="Content rating")

    content: str | None = None
    image_url: str | None = Field(default=None, max_length=500)
    file_url: str | None = Field(default=None, max_length=500)

    word_count: int | None = Field(default=None, ge=0)
    chapter_count: int | None = Field(default=None, ge=0)
    is_complete: bool = False

    tags: list[str] = Field(default_factory=list, description="Tag names")

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        return _check_type(v)

    @field_validator("rating")
    @classmethod
    def validate_rating(cls, v: str) -> str:
        return _check_rating(v)


class FanworkUpdate(BaseModel):
    """
    Schema for updating a fanwork - all fields optional.

    When `tags` is given it replaces the fanwork's tag set.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    type: str | None = None
    rating: str | None = None
    content: str | None = None
    image_url: str | None = Field(default=None, max_length=500)
    file_url: str | None = Field(default=None, max_length=500)
    word_count: int | None = Field(default=None, ge=0)
    chapter_count: int | None = Field(default=None, ge=0)
    is_complete: bool | None = None
    tags: list[str] | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str | None) -> str | None:
        return None if v is None else _check_type(v)

    @field_validator("rating")
    @classmethod
    def validate_rating(cls, v: str | None) -> str | None:
        return None if v is None else _check_rating(v)


class AO3ImportRequest(BaseModel):
    """Schema for importing a work from Archive of Our Own by URL"""

    ao3_url: str = Field(..., min_length=1, max_length=500)
    title: str | None = Field(default=None, max_length=255)
    description: str | None = None


class FanworkFilters(BaseModel):
    """
    Browse filters for fanwork listings.

    Values within one dimension (types, ratings, tags) match if any matches;
    dimensions combine with AND.
    """

    types: list[str] = Field(default_factory=list)
    ratings: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    search: str | None = None
    author_id: int | None = None
    limit: int = Field(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)


class FanworkCounts(BaseModel):
    """Engagement counts derived from the relation tables at read time"""

    likes: int = 0
    comments: int = 0
    bookmarks: int = 0


class FanworkResponse(FanworkBase):
    """
    Schema for fanwork response - what API returns.

    Inherits public fields from FanworkBase. Moderation bookkeeping is only
    exposed in FanworkModerationResponse.
    """

    fanwork_id: int
    author_id: int
    is_hidden: bool = False
    imported_at: UTCDatetimeOptional = None
    created_at: UTCDatetime
    updated_at: UTCDatetime
    tags: list[str] = Field(default_factory=list)
    author: UserSummary | None = None

    model_config = {"from_attributes": True}


class FanworkDetailResponse(FanworkResponse):
    """Single fanwork with counts and the caller's own interaction state"""

    counts: FanworkCounts = Field(default_factory=FanworkCounts)
    is_liked: bool = False
    is_bookmarked: bool = False


class FanworkModerationResponse(FanworkResponse):
    """Fanwork as seen by moderators"""

    moderation_reason: str | None = None
    moderated_at: UTCDatetimeOptional = None
    moderated_by: int | None = None
    report_count: int = 0
    is_reported: bool = False


class FanworkListResponse(BaseModel):
    """Schema for paginated fanwork list"""

    total: int
    limit: int
    offset: int
    fanworks: list[FanworkResponse]


class LikeResponse(BaseModel):
    """State after toggling a like"""

    is_liked: bool


class BookmarkResponse(BaseModel):
    """State after toggling a bookmark"""

    is_bookmarked: bool


class UploadResponse(BaseModel):
    """Result of attaching a file to a fanwork"""

    fanwork_id: int
    url: str
    content_type: str
    size: int
