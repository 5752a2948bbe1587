"""
Response builders shared by the v1 routers.

Each builder batches its lookups (tags, authors) so a page of results costs a
fixed number of queries regardless of its size.
"""

from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.config import InteractionKind
from fanhub.core.access import Identity
from fanhub.models.comment import Comments
from fanhub.models.fanwork import Fanworks
from fanhub.models.report import Reports
from fanhub.schemas.comment import CommentResponse
from fanhub.schemas.common import UserSummary
from fanhub.schemas.fanwork import (
    FanworkDetailResponse,
    FanworkModerationResponse,
    FanworkResponse,
)
from fanhub.schemas.report import ReportResponse
from fanhub.services.counters import get_counts
from fanhub.services.interactions import has_interaction
from fanhub.services.moderation import get_report_summary
from fanhub.services.tags import get_tag_names_for_fanworks
from fanhub.services.users import get_users_by_ids


async def _summaries(db: AsyncSession, user_ids: set[int]) -> dict[int, UserSummary]:
    users = await get_users_by_ids(db, user_ids)
    return {user_id: UserSummary.model_validate(user) for user_id, user in users.items()}


async def fanwork_responses(db: AsyncSession, fanworks: Sequence[Fanworks]) -> list[FanworkResponse]:
    """Fanworks with their tag names and author summaries."""
    fanwork_ids = [f.fanwork_id for f in fanworks if f.fanwork_id is not None]
    tags = await get_tag_names_for_fanworks(db, fanwork_ids)
    authors = await _summaries(db, {f.author_id for f in fanworks})

    return [
        FanworkResponse.model_validate(fanwork).model_copy(
            update={
                "tags": tags.get(fanwork.fanwork_id, []),  # type: ignore[arg-type]
                "author": authors.get(fanwork.author_id),
            }
        )
        for fanwork in fanworks
    ]


async def fanwork_detail(
    db: AsyncSession, fanwork: Fanworks, identity: Identity | None
) -> FanworkDetailResponse:
    """One fanwork with counts and the caller's like/bookmark state."""
    assert fanwork.fanwork_id is not None
    fanwork_id = fanwork.fanwork_id

    tags = await get_tag_names_for_fanworks(db, [fanwork_id])
    authors = await _summaries(db, {fanwork.author_id})
    counts = await get_counts(db, fanwork_id)

    is_liked = is_bookmarked = False
    if identity is not None:
        is_liked = await has_interaction(db, identity.user_id, fanwork_id, InteractionKind.LIKE)
        is_bookmarked = await has_interaction(
            db, identity.user_id, fanwork_id, InteractionKind.BOOKMARK
        )

    return FanworkDetailResponse.model_validate(fanwork).model_copy(
        update={
            "tags": tags.get(fanwork_id, []),
            "author": authors.get(fanwork.author_id),
            "counts": counts,
            "is_liked": is_liked,
            "is_bookmarked": is_bookmarked,
        }
    )


async def fanwork_moderation(db: AsyncSession, fanwork: Fanworks) -> FanworkModerationResponse:
    """Fanwork with moderation metadata and derived report counters."""
    assert fanwork.fanwork_id is not None
    tags = await get_tag_names_for_fanworks(db, [fanwork.fanwork_id])
    authors = await _summaries(db, {fanwork.author_id})
    summary = await get_report_summary(db, fanwork.fanwork_id)

    return FanworkModerationResponse.model_validate(fanwork).model_copy(
        update={
            "tags": tags.get(fanwork.fanwork_id, []),
            "author": authors.get(fanwork.author_id),
            "report_count": summary.report_count,
            "is_reported": summary.is_reported,
        }
    )


async def comment_responses(db: AsyncSession, comments: Sequence[Comments]) -> list[CommentResponse]:
    """Comments with embedded author summaries."""
    authors = await _summaries(db, {c.user_id for c in comments})
    return [
        CommentResponse.model_validate(comment).model_copy(
            update={"user": authors.get(comment.user_id)}
        )
        for comment in comments
    ]


async def report_responses(db: AsyncSession, reports: Sequence[Reports]) -> list[ReportResponse]:
    """Reports with embedded reporter summaries."""
    reporters = await _summaries(db, {r.reporter_id for r in reports})
    return [
        ReportResponse.model_validate(report).model_copy(
            update={"reporter": reporters.get(report.reporter_id)}
        )
        for report in reports
    ]
