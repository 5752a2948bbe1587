"""
Comment service.

Comments are flat (no threading), listed newest first, and hard-deleted by
their author or by a moderator.
"""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.config import ModerationActionType
from fanhub.core.access import Identity, check_access, is_age_gated
from fanhub.core.errors import ForbiddenError, NotFoundError, ValidationError
from fanhub.core.logging import get_logger
from fanhub.models.comment import Comments
from fanhub.models.report import Reports
from fanhub.services.audit import record_moderation_action
from fanhub.services.fanworks import get_fanwork

logger = get_logger(__name__)

MAX_COMMENT_LENGTH = 10000


async def get_comment(db: AsyncSession, comment_id: int) -> Comments:
    """
    Load a comment by id.

    Raises:
        NotFoundError: No such comment
    """
    result = await db.execute(select(Comments).where(Comments.comment_id == comment_id))  # type: ignore[arg-type]
    comment = result.scalar_one_or_none()
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment


async def list_comments(
    db: AsyncSession,
    fanwork_id: int,
    identity: Identity | None,
    limit: int = 100,
    offset: int = 0,
) -> tuple[list[Comments], int]:
    """Comments on a fanwork the caller can see, newest first."""
    await get_fanwork(db, fanwork_id, identity)

    total_result = await db.execute(
        select(func.count()).select_from(Comments).where(Comments.fanwork_id == fanwork_id)  # type: ignore[arg-type]
    )
    result = await db.execute(
        select(Comments)
        .where(Comments.fanwork_id == fanwork_id)  # type: ignore[arg-type]
        .order_by(Comments.created_at.desc(), Comments.comment_id.desc())  # type: ignore[attr-defined,union-attr]
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all()), total_result.scalar_one()


async def create_comment(
    db: AsyncSession, identity: Identity | None, fanwork_id: int, content: str
) -> Comments:
    """
    Comment on a fanwork.

    Raises:
        ValidationError: Empty or overlong text
        NotFoundError: Fanwork missing or not visible to the caller
        ForbiddenError: Age-gated fanwork and the caller is not age verified
    """
    actor = check_access(identity)

    content = content.strip()
    if not content:
        raise ValidationError("Comment cannot be empty")
    if len(content) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters")

    fanwork = await get_fanwork(db, fanwork_id, actor)
    if fanwork.author_id != actor.user_id and is_age_gated(fanwork.rating):
        check_access(actor, age_gate=True)

    comment = Comments(content=content, fanwork_id=fanwork_id, user_id=actor.user_id)
    db.add(comment)
    await db.commit()
    await db.refresh(comment)

    logger.info("comment_created", comment_id=comment.comment_id, fanwork_id=fanwork_id)
    return comment


async def purge_comment(db: AsyncSession, comment: Comments) -> None:
    """Hard-delete a comment and the reports filed against it. Does not commit."""
    comment_id = comment.comment_id
    if comment in db:
        db.expunge(comment)

    await db.execute(
        delete(Reports)
        .where(Reports.comment_id == comment_id)  # type: ignore[arg-type]
        .execution_options(synchronize_session=False)
    )
    await db.execute(
        delete(Comments)
        .where(Comments.comment_id == comment_id)  # type: ignore[arg-type]
        .execution_options(synchronize_session=False)
    )


async def delete_comment(db: AsyncSession, identity: Identity | None, comment_id: int) -> None:
    """
    Delete a comment. Authors may delete their own; moderators may delete any.

    Deletions by someone other than the author are audit-logged.
    """
    actor = check_access(identity)
    comment = await get_comment(db, comment_id)

    is_author = comment.user_id == actor.user_id
    if not is_author and not actor.is_moderator:
        raise ForbiddenError("You can only delete your own comments")

    details = {
        "comment_id": comment_id,
        "fanwork_id": comment.fanwork_id,
        "author_id": comment.user_id,
        "content": comment.content[:200],
    }
    await purge_comment(db, comment)
    if not is_author:
        record_moderation_action(
            db,
            actor.user_id,
            ModerationActionType.COMMENT_DELETE,
            fanwork_id=details["fanwork_id"],
            target_user_id=details["author_id"],
            details=details,
        )
    await db.commit()

    logger.info("comment_deleted", comment_id=comment_id, by_author=is_author)
