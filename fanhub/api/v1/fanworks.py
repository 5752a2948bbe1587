"""
Fanworks API endpoints
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.api.dependencies import PaginationParams, fanwork_filters
from fanhub.api.serializers import comment_responses, fanwork_detail, fanwork_responses
from fanhub.config import settings
from fanhub.core.auth import ActiveIdentity, OptionalIdentity
from fanhub.core.database import get_db
from fanhub.core.errors import ValidationError
from fanhub.schemas.comment import CommentCreate, CommentListResponse, CommentResponse
from fanhub.schemas.fanwork import (
    AO3ImportRequest,
    BookmarkResponse,
    FanworkCounts,
    FanworkCreate,
    FanworkDetailResponse,
    FanworkFilters,
    FanworkListResponse,
    FanworkUpdate,
    LikeResponse,
    UploadResponse,
)
from fanhub.schemas.report import ReportCreate, ReportResponse
from fanhub.services import comments as comment_service
from fanhub.services import fanworks as fanwork_service
from fanhub.services.counters import get_counts
from fanhub.services.interactions import toggle_bookmark, toggle_like
from fanhub.services.moderation import create_report
from fanhub.services.storage import LocalAssetStore, get_asset_store

router = APIRouter(prefix="/fanworks", tags=["fanworks"])


@router.get("", response_model=FanworkListResponse)
async def list_fanworks(
    filters: Annotated[FanworkFilters, Depends(fanwork_filters)],
    identity: OptionalIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FanworkListResponse:
    """
    Browse fanworks, newest first.

    **Filters** (repeat a parameter to match any of several values):
    - `type`: artwork, fanfiction, comic
    - `rating`: all-ages, teen, mature, explicit
    - `tags`: tag names
    - `search`: text in title or description
    - `author_id`

    **Examples:**
    - `/fanworks?type=artwork&type=comic` - Artwork or comics
    - `/fanworks?tags=fluff&rating=teen` - Teen-rated works tagged "fluff"

    Hidden works only appear for their author and moderators. Mature and
    explicit works only appear for age-verified users and their author.
    """
    fanworks, total = await fanwork_service.list_fanworks(db, identity, filters)
    return FanworkListResponse(
        total=total,
        limit=filters.limit,
        offset=filters.offset,
        fanworks=await fanwork_responses(db, fanworks),
    )


@router.post("", response_model=FanworkDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_fanwork(
    data: FanworkCreate,
    identity: ActiveIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FanworkDetailResponse:
    """
    Publish a fanwork.

    Mature and explicit ratings require a verified age.
    """
    fanwork = await fanwork_service.create_fanwork(db, identity, data)
    return await fanwork_detail(db, fanwork, identity)


@router.post(
    "/import/ao3", response_model=FanworkDetailResponse, status_code=status.HTTP_201_CREATED
)
async def import_from_ao3(
    data: AO3ImportRequest,
    identity: ActiveIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FanworkDetailResponse:
    """
    Import a work from Archive of Our Own by URL.

    Creates a teen-rated fanfiction entry that links back to the original work.
    """
    fanwork = await fanwork_service.import_ao3_work(db, identity, data)
    return await fanwork_detail(db, fanwork, identity)


@router.get("/{fanwork_id}", response_model=FanworkDetailResponse)
async def get_fanwork(
    fanwork_id: int,
    identity: OptionalIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FanworkDetailResponse:
    """
    Get a single fanwork with counts, tags and the caller's like/bookmark state.

    Hidden works return 404 for everyone except their author and moderators.
    """
    fanwork = await fanwork_service.get_fanwork(db, fanwork_id, identity)
    return await fanwork_detail(db, fanwork, identity)


@router.patch("/{fanwork_id}", response_model=FanworkDetailResponse)
async def update_fanwork(
    fanwork_id: int,
    changes: FanworkUpdate,
    identity: ActiveIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FanworkDetailResponse:
    """Edit your own fanwork. Passing `tags` replaces the current tag set."""
    fanwork = await fanwork_service.update_fanwork(db, identity, fanwork_id, changes)
    return await fanwork_detail(db, fanwork, identity)


@router.delete("/{fanwork_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_fanwork(
    fanwork_id: int,
    identity: ActiveIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete your own fanwork (moderators may delete any)."""
    await fanwork_service.delete_fanwork(db, identity, fanwork_id)


@router.post("/{fanwork_id}/file", response_model=UploadResponse)
async def upload_fanwork_file(
    fanwork_id: int,
    identity: ActiveIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    store: Annotated[LocalAssetStore, Depends(get_asset_store)],
    file: UploadFile = File(..., description="Image or document to attach"),
) -> UploadResponse:
    """
    Attach an image (artwork, comics) or document (fanfiction) to your fanwork.

    **Accepted types:** JPEG, PNG, GIF, WebP, plain text, PDF, Word.
    **Size limit:** 10 MB.
    """
    # Read at most one byte past the limit so oversized uploads are rejected
    data = await file.read(settings.MAX_UPLOAD_SIZE + 1)
    if len(data) > settings.MAX_UPLOAD_SIZE:
        raise ValidationError(f"File size exceeds maximum of {settings.MAX_UPLOAD_SIZE} bytes")

    content_type = file.content_type or ""
    _, url = await fanwork_service.attach_fanwork_file(
        db, identity, fanwork_id, data, content_type, store=store
    )
    return UploadResponse(fanwork_id=fanwork_id, url=url, content_type=content_type, size=len(data))


@router.post("/{fanwork_id}/like", response_model=LikeResponse)
async def like_fanwork(
    fanwork_id: int,
    identity: ActiveIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LikeResponse:
    """Toggle your like. Returns whether the fanwork is now liked."""
    return LikeResponse(is_liked=await toggle_like(db, identity, fanwork_id))


@router.post("/{fanwork_id}/bookmark", response_model=BookmarkResponse)
async def bookmark_fanwork(
    fanwork_id: int,
    identity: ActiveIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookmarkResponse:
    """Toggle your bookmark. Returns whether the fanwork is now bookmarked."""
    return BookmarkResponse(is_bookmarked=await toggle_bookmark(db, identity, fanwork_id))


@router.get("/{fanwork_id}/counts", response_model=FanworkCounts)
async def get_fanwork_counts(
    fanwork_id: int,
    identity: OptionalIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FanworkCounts:
    """Like, comment and bookmark counts, computed at read time."""
    await fanwork_service.get_fanwork(db, fanwork_id, identity)
    return await get_counts(db, fanwork_id)


@router.get("/{fanwork_id}/comments", response_model=CommentListResponse)
async def list_fanwork_comments(
    fanwork_id: int,
    pagination: Annotated[PaginationParams, Depends()],
    identity: OptionalIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CommentListResponse:
    """Comments on a fanwork, newest first."""
    comments, total = await comment_service.list_comments(
        db, fanwork_id, identity, limit=pagination.limit, offset=pagination.offset
    )
    return CommentListResponse(total=total, comments=await comment_responses(db, comments))


@router.post(
    "/{fanwork_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_fanwork_comment(
    fanwork_id: int,
    data: CommentCreate,
    identity: ActiveIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CommentResponse:
    """Comment on a fanwork."""
    comment = await comment_service.create_comment(db, identity, fanwork_id, data.content)
    return (await comment_responses(db, [comment]))[0]


@router.post(
    "/{fanwork_id}/report",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def report_fanwork(
    fanwork_id: int,
    data: ReportCreate,
    identity: ActiveIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReportResponse:
    """Report a fanwork to the moderators."""
    report = await create_report(
        db, identity, fanwork_id=fanwork_id, reason=data.reason, description=data.description
    )
    return ReportResponse.model_validate(report)
