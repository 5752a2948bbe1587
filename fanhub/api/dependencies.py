"""
Common query parameter models for API endpoints.

These Pydantic models are used with FastAPI's Depends() to provide reusable
query parameter sets, reducing code duplication across routes.
"""

from typing import Annotated

from fastapi import Depends, Query
from pydantic import BaseModel, Field

from fanhub.config import settings
from fanhub.schemas.fanwork import FanworkFilters


class PaginationParams(BaseModel):
    """Common limit/offset pagination query parameters."""

    limit: int = Field(
        default=settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Items per page",
    )
    offset: int = Field(default=0, ge=0, description="Items to skip")


def fanwork_filters(
    pagination: Annotated[PaginationParams, Depends()],
    type: Annotated[list[str] | None, Query(description="Fanwork types (any of)")] = None,
    rating: Annotated[list[str] | None, Query(description="Content ratings (any of)")] = None,
    tags: Annotated[list[str] | None, Query(description="Tag names (any of)")] = None,
    search: Annotated[
        str | None, Query(max_length=200, description="Search in title and description")
    ] = None,
    author_id: Annotated[int | None, Query(description="Filter by author")] = None,
) -> FanworkFilters:
    """
    Build browse filters from query parameters.

    Multi-valued filters repeat the parameter: `?type=artwork&type=comic`.
    """
    return FanworkFilters(
        types=type or [],
        ratings=rating or [],
        tags=tags or [],
        search=search,
        author_id=author_id,
        limit=pagination.limit,
        offset=pagination.offset,
    )
