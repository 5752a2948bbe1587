"""
Tags API endpoints
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.core.database import get_db
from fanhub.schemas.tag import TagListResponse, TagResponse
from fanhub.services.tags import list_tags

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=TagListResponse)
async def get_tags(
    db: Annotated[AsyncSession, Depends(get_db)],
    search: Annotated[str | None, Query(max_length=100, description="Tag name prefix")] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> TagListResponse:
    """
    List tags alphabetically.

    **Examples:**
    - `/tags?search=hurt` - Tags starting with "hurt"
    """
    tags, total = await list_tags(db, search=search, limit=limit, offset=offset)
    return TagListResponse(total=total, tags=[TagResponse.model_validate(tag) for tag in tags])
