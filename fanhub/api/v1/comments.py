"""
Comments API endpoints
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.core.auth import ActiveIdentity
from fanhub.core.database import get_db
from fanhub.schemas.report import ReportCreate, ReportResponse
from fanhub.services.comments import delete_comment
from fanhub.services.moderation import create_report

router = APIRouter(prefix="/comments", tags=["comments"])


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_comment(
    comment_id: int,
    identity: ActiveIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete your own comment (moderators may delete any)."""
    await delete_comment(db, identity, comment_id)


@router.post(
    "/{comment_id}/report",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def report_comment(
    comment_id: int,
    data: ReportCreate,
    identity: ActiveIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReportResponse:
    """Report a comment to the moderators."""
    report = await create_report(
        db, identity, comment_id=comment_id, reason=data.reason, description=data.description
    )
    return ReportResponse.model_validate(report)
