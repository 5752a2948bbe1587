"""
User API endpoints
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.api.dependencies import PaginationParams
from fanhub.api.serializers import fanwork_responses
from fanhub.core.auth import ActiveIdentity, CurrentIdentity
from fanhub.core.database import get_db
from fanhub.schemas.fanwork import FanworkListResponse
from fanhub.schemas.report import ReportCreate, ReportResponse
from fanhub.schemas.user import UserPrivateResponse, UserResponse, UserUpdate
from fanhub.services.fanworks import list_bookmarked_fanworks, list_liked_fanworks
from fanhub.services.moderation import create_report
from fanhub.services.users import get_user, update_profile

router = APIRouter(prefix="/users", tags=["users"])


@router.patch("/me", response_model=UserPrivateResponse)
async def update_my_profile(
    changes: UserUpdate,
    identity: ActiveIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserPrivateResponse:
    """Update your profile. Only the fields you send are changed."""
    user = await update_profile(db, identity, changes)
    return UserPrivateResponse.model_validate(user)


@router.get("/me/liked-fanworks", response_model=FanworkListResponse)
async def get_my_liked_fanworks(
    pagination: Annotated[PaginationParams, Depends()],
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FanworkListResponse:
    """Fanworks you like, most recently liked first."""
    fanworks, total = await list_liked_fanworks(
        db, identity, limit=pagination.limit, offset=pagination.offset
    )
    return FanworkListResponse(
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        fanworks=await fanwork_responses(db, fanworks),
    )


@router.get("/me/bookmarked-fanworks", response_model=FanworkListResponse)
async def get_my_bookmarked_fanworks(
    pagination: Annotated[PaginationParams, Depends()],
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FanworkListResponse:
    """Fanworks you bookmarked, most recently bookmarked first."""
    fanworks, total = await list_bookmarked_fanworks(
        db, identity, limit=pagination.limit, offset=pagination.offset
    )
    return FanworkListResponse(
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        fanworks=await fanwork_responses(db, fanworks),
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user_profile(
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """Public profile of a user."""
    user = await get_user(db, user_id)
    return UserResponse.model_validate(user)


@router.post(
    "/{user_id}/report",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def report_user(
    user_id: int,
    data: ReportCreate,
    identity: ActiveIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReportResponse:
    """Report a user to the moderators."""
    report = await create_report(
        db, identity, reported_user_id=user_id, reason=data.reason, description=data.description
    )
    return ReportResponse.model_validate(report)
