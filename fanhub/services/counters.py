"""
Engagement counters.

Counts are always computed from the relation tables at read time. There
are no cached counter columns, so they cannot drift from the rows they
count.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.core.errors import NotFoundError
from fanhub.models.comment import Comments
from fanhub.models.fanwork import Fanworks
from fanhub.models.interaction import Bookmarks, Likes
from fanhub.schemas.fanwork import FanworkCounts


async def get_counts(db: AsyncSession, fanwork_id: int) -> FanworkCounts:
    """
    Count likes, comments and bookmarks of one fanwork.

    Raises:
        NotFoundError: No such fanwork
    """
    exists = await db.execute(
        select(Fanworks.fanwork_id).where(Fanworks.fanwork_id == fanwork_id)  # type: ignore[call-overload]
    )
    if exists.first() is None:
        raise NotFoundError("Fanwork not found")

    likes = select(func.count()).select_from(Likes).where(Likes.fanwork_id == fanwork_id)  # type: ignore[arg-type]
    comments = (
        select(func.count()).select_from(Comments).where(Comments.fanwork_id == fanwork_id)  # type: ignore[arg-type]
    )
    bookmarks = (
        select(func.count()).select_from(Bookmarks).where(Bookmarks.fanwork_id == fanwork_id)  # type: ignore[arg-type]
    )

    result = await db.execute(
        select(likes.scalar_subquery(), comments.scalar_subquery(), bookmarks.scalar_subquery())
    )
    like_count, comment_count, bookmark_count = result.one()
    return FanworkCounts(likes=like_count, comments=comment_count, bookmarks=bookmark_count)

