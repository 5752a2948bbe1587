"""
Admin API endpoints for moderators and administrators.

Everything here requires the moderator role unless noted. Every action
writes a moderation audit row.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.api.dependencies import PaginationParams
from fanhub.api.serializers import fanwork_moderation, report_responses
from fanhub.core.auth import AdminIdentity, ModeratorIdentity
from fanhub.core.database import get_db
from fanhub.schemas.admin import (
    AgeVerificationUpdate,
    BanUserRequest,
    HideFanworkRequest,
    RoleUpdateRequest,
)
from fanhub.schemas.fanwork import FanworkModerationResponse
from fanhub.schemas.report import ReportListResponse, ReportResponse, ReportReview
from fanhub.schemas.user import UserModerationResponse
from fanhub.services import moderation
from fanhub.services.users import set_age_verified, set_user_role

router = APIRouter(prefix="/admin", tags=["admin"])


# ===== Reports =====


@router.get("/reports", response_model=ReportListResponse)
async def list_reports(
    pagination: Annotated[PaginationParams, Depends()],
    moderator: ModeratorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    status_filter: Annotated[
        str | None,
        Query(alias="status", description="pending, reviewed, resolved or dismissed"),
    ] = None,
) -> ReportListResponse:
    """List reports, newest first."""
    reports, total = await moderation.list_reports(
        db, moderator, status=status_filter, limit=pagination.limit, offset=pagination.offset
    )
    return ReportListResponse(
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        reports=await report_responses(db, reports),
    )


@router.get("/reports/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: int,
    moderator: ModeratorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReportResponse:
    """Get a single report."""
    report = await moderation.get_report(db, moderator, report_id)
    return (await report_responses(db, [report]))[0]


@router.patch("/reports/{report_id}", response_model=ReportResponse)
async def review_report(
    report_id: int,
    review: ReportReview,
    moderator: ModeratorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReportResponse:
    """
    Close a pending report as reviewed, resolved or dismissed.

    A report can only be closed once; closing it again returns 409.
    """
    report = await moderation.review_report(
        db, moderator, report_id, review.status, review.moderation_action
    )
    return (await report_responses(db, [report]))[0]


# ===== Fanworks =====


@router.patch("/fanworks/{fanwork_id}/hide", response_model=FanworkModerationResponse)
async def hide_fanwork(
    fanwork_id: int,
    data: HideFanworkRequest,
    moderator: ModeratorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FanworkModerationResponse:
    """Hide a fanwork from everyone but its author and moderators."""
    fanwork = await moderation.hide_fanwork(db, moderator, fanwork_id, data.reason)
    return await fanwork_moderation(db, fanwork)


@router.patch("/fanworks/{fanwork_id}/unhide", response_model=FanworkModerationResponse)
async def unhide_fanwork(
    fanwork_id: int,
    moderator: ModeratorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FanworkModerationResponse:
    """Make a hidden fanwork public again."""
    fanwork = await moderation.unhide_fanwork(db, moderator, fanwork_id)
    return await fanwork_moderation(db, fanwork)


@router.delete("/fanworks/{fanwork_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_fanwork(
    fanwork_id: int,
    moderator: ModeratorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    reason: Annotated[str | None, Query(max_length=500)] = None,
) -> None:
    """Permanently delete a fanwork with its comments, likes, bookmarks and reports."""
    await moderation.moderator_delete_fanwork(db, moderator, fanwork_id, reason)


# ===== Comments =====


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: int,
    moderator: ModeratorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    reason: Annotated[str | None, Query(max_length=500)] = None,
) -> None:
    """Permanently delete a comment."""
    await moderation.moderator_delete_comment(db, moderator, comment_id, reason)


# ===== Users =====


@router.post("/users/{user_id}/ban", response_model=UserModerationResponse)
async def ban_user(
    user_id: int,
    data: BanUserRequest,
    moderator: ModeratorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserModerationResponse:
    """
    Ban a user.

    Their existing fanworks and comments stay visible. Only admins can ban
    moderators or admins.
    """
    user = await moderation.ban_user(db, moderator, user_id, data.reason)
    return UserModerationResponse.model_validate(user)


@router.post("/users/{user_id}/unban", response_model=UserModerationResponse)
async def unban_user(
    user_id: int,
    moderator: ModeratorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserModerationResponse:
    """Lift a user's ban."""
    user = await moderation.unban_user(db, moderator, user_id)
    return UserModerationResponse.model_validate(user)


@router.patch("/users/{user_id}/age-verification", response_model=UserModerationResponse)
async def update_age_verification(
    user_id: int,
    data: AgeVerificationUpdate,
    moderator: ModeratorIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserModerationResponse:
    """Set or clear a user's age verification."""
    user = await set_age_verified(db, moderator, user_id, data.age_verified)
    return UserModerationResponse.model_validate(user)


@router.patch("/users/{user_id}/role", response_model=UserModerationResponse)
async def update_role(
    user_id: int,
    data: RoleUpdateRequest,
    admin: AdminIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserModerationResponse:
    """Change a user's role. **Admin only.**"""
    user = await set_user_role(db, admin, user_id, data.role)
    return UserModerationResponse.model_validate(user)
