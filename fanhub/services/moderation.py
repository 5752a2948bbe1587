"""
Moderation lifecycle: reports, review, hiding, bans and moderator deletions.

Report states:

    pending -> reviewed | resolved | dismissed

All three targets are terminal. A review is a conditional update that only
matches while the report is still pending, so of two moderators reviewing the
same report at once exactly one wins; the other gets InvalidTransitionError
and the winner's reviewer, timestamp and action are left untouched.

Every moderator action writes a ModerationActions audit row.
"""

from datetime import UTC, datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.config import ModerationActionType, ReportReason, ReportStatus, UserRole
from fanhub.core.access import Identity, check_access
from fanhub.core.errors import (
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from fanhub.core.logging import get_logger
from fanhub.models.fanwork import Fanworks
from fanhub.models.report import Reports
from fanhub.models.user import Users
from fanhub.schemas.report import ReportSummary
from fanhub.services.audit import record_moderation_action
from fanhub.services.comments import get_comment, purge_comment
from fanhub.services.fanworks import get_fanwork, purge_fanwork
from fanhub.services.users import get_user

logger = get_logger(__name__)


# ===== Reports =====


async def create_report(
    db: AsyncSession,
    identity: Identity | None,
    *,
    fanwork_id: int | None = None,
    comment_id: int | None = None,
    reported_user_id: int | None = None,
    reason: str | None,
    description: str | None = None,
) -> Reports:
    """
    File a report against exactly one fanwork, comment or user.

    Filing a report does not hide or otherwise change the target.

    Raises:
        ValidationError: Not exactly one target, or missing/unknown reason
        NotFoundError: Target does not exist (or is hidden from the reporter)
    """
    reporter = check_access(identity)

    targets = [t for t in (fanwork_id, comment_id, reported_user_id) if t is not None]
    if len(targets) != 1:
        raise ValidationError("A report must target exactly one fanwork, comment or user")

    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Report reason is required")
    if reason not in ReportReason.VALUES:
        raise ValidationError(f"Invalid report reason: {reason}")

    if fanwork_id is not None:
        await get_fanwork(db, fanwork_id, reporter)
    elif comment_id is not None:
        await get_comment(db, comment_id)
    else:
        if reported_user_id == reporter.user_id:
            raise ValidationError("You cannot report yourself")
        await get_user(db, reported_user_id)  # type: ignore[arg-type]

    report = Reports(
        reporter_id=reporter.user_id,
        fanwork_id=fanwork_id,
        comment_id=comment_id,
        reported_user_id=reported_user_id,
        reason=reason,
        description=(description or "").strip() or None,
        status=ReportStatus.PENDING,
    )
    db.add(report)
    await db.commit()
    await db.refresh(report)

    logger.info(
        "report_created",
        report_id=report.report_id,
        reporter_id=reporter.user_id,
        fanwork_id=fanwork_id,
        comment_id=comment_id,
        reported_user_id=reported_user_id,
        reason=reason,
    )
    return report


async def _load_report(db: AsyncSession, report_id: int) -> Reports:
    result = await db.execute(
        select(Reports)
        .where(Reports.report_id == report_id)  # type: ignore[arg-type]
        .execution_options(populate_existing=True)
    )
    report = result.scalar_one_or_none()
    if report is None:
        raise NotFoundError("Report not found")
    return report


async def get_report(db: AsyncSession, identity: Identity | None, report_id: int) -> Reports:
    """Load one report. Moderator or higher."""
    check_access(identity, min_role=UserRole.MODERATOR)
    return await _load_report(db, report_id)


async def list_reports(
    db: AsyncSession,
    identity: Identity | None,
    status: str | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Reports], int]:
    """
    List reports, newest first, optionally filtered by status. Moderator or higher.

    Returns:
        (page of reports, total matching)
    """
    check_access(identity, min_role=UserRole.MODERATOR)
    if status is not None and status not in ReportStatus.VALUES:
        raise ValidationError(f"Invalid report status: {status}")

    conditions = []
    if status is not None:
        conditions.append(Reports.status == status)

    total_result = await db.execute(select(func.count()).select_from(Reports).where(*conditions))
    result = await db.execute(
        select(Reports)
        .where(*conditions)
        .order_by(Reports.created_at.desc(), Reports.report_id.desc())  # type: ignore[attr-defined,union-attr]
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all()), total_result.scalar_one()


async def review_report(
    db: AsyncSession,
    identity: Identity | None,
    report_id: int,
    new_status: str,
    moderation_action: str | None = None,
) -> Reports:
    """
    Move a pending report to a terminal status.

    Raises:
        ValidationError: new_status is not a terminal status
        NotFoundError: No such report
        InvalidTransitionError: Report is no longer pending
    """
    reviewer = check_access(identity, min_role=UserRole.MODERATOR)
    if new_status not in ReportStatus.TERMINAL:
        raise ValidationError(
            f"Status must be one of: {', '.join(sorted(ReportStatus.TERMINAL))}"
        )

    now = datetime.now(UTC)
    result = await db.execute(
        update(Reports)
        .where(
            Reports.report_id == report_id,  # type: ignore[arg-type]
            Reports.status == ReportStatus.PENDING,  # type: ignore[arg-type]
        )
        .values(
            status=new_status,
            reviewed_by=reviewer.user_id,
            reviewed_at=now,
            moderation_action=moderation_action,
        )
        .execution_options(synchronize_session=False)
    )

    if result.rowcount == 0:  # type: ignore[attr-defined]
        report = await _load_report(db, report_id)
        logger.info(
            "report_review_rejected",
            report_id=report_id,
            current_status=report.status,
            requested_status=new_status,
        )
        raise InvalidTransitionError(f"Report has already been {report.status}")

    record_moderation_action(
        db,
        reviewer.user_id,
        ModerationActionType.REPORT_REVIEW,
        report_id=report_id,
        details={"status": new_status, "moderation_action": moderation_action},
    )
    await db.commit()

    logger.info("report_reviewed", report_id=report_id, status=new_status)
    return await _load_report(db, report_id)


async def get_report_summary(db: AsyncSession, fanwork_id: int) -> ReportSummary:
    """
    Report counters for a fanwork, computed from the reports table.

    report_count counts every report filed against the fanwork; is_reported
    is true while any of them is still pending.
    """
    result = await db.execute(
        select(Reports.status, func.count())  # type: ignore[call-overload]
        .where(Reports.fanwork_id == fanwork_id)
        .group_by(Reports.status)
    )
    by_status = dict(result.fetchall())
    return ReportSummary(
        report_count=sum(by_status.values()),
        is_reported=by_status.get(ReportStatus.PENDING, 0) > 0,
    )


# ===== Fanworks =====


async def _load_fanwork_for_moderation(db: AsyncSession, fanwork_id: int) -> Fanworks:
    result = await db.execute(select(Fanworks).where(Fanworks.fanwork_id == fanwork_id))  # type: ignore[arg-type]
    fanwork = result.scalar_one_or_none()
    if fanwork is None:
        raise NotFoundError("Fanwork not found")
    return fanwork


async def hide_fanwork(
    db: AsyncSession, identity: Identity | None, fanwork_id: int, reason: str
) -> Fanworks:
    """Hide a fanwork from everyone except its author and moderators."""
    moderator = check_access(identity, min_role=UserRole.MODERATOR)
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("A reason is required to hide a fanwork")

    fanwork = await _load_fanwork_for_moderation(db, fanwork_id)
    fanwork.is_hidden = True
    fanwork.moderation_reason = reason
    fanwork.moderated_at = datetime.now(UTC)
    fanwork.moderated_by = moderator.user_id

    record_moderation_action(
        db,
        moderator.user_id,
        ModerationActionType.FANWORK_HIDE,
        fanwork_id=fanwork_id,
        target_user_id=fanwork.author_id,
        details={"reason": reason},
    )
    await db.commit()
    await db.refresh(fanwork)

    logger.info("fanwork_hidden", fanwork_id=fanwork_id, reason=reason)
    return fanwork


async def unhide_fanwork(db: AsyncSession, identity: Identity | None, fanwork_id: int) -> Fanworks:
    """Make a hidden fanwork public again and clear its moderation metadata."""
    moderator = check_access(identity, min_role=UserRole.MODERATOR)

    fanwork = await _load_fanwork_for_moderation(db, fanwork_id)
    previous_reason = fanwork.moderation_reason
    fanwork.is_hidden = False
    fanwork.moderation_reason = None
    fanwork.moderated_at = None
    fanwork.moderated_by = None

    record_moderation_action(
        db,
        moderator.user_id,
        ModerationActionType.FANWORK_UNHIDE,
        fanwork_id=fanwork_id,
        target_user_id=fanwork.author_id,
        details={"previous_reason": previous_reason},
    )
    await db.commit()
    await db.refresh(fanwork)

    logger.info("fanwork_unhidden", fanwork_id=fanwork_id)
    return fanwork


async def moderator_delete_fanwork(
    db: AsyncSession, identity: Identity | None, fanwork_id: int, reason: str | None = None
) -> None:
    """Hard-delete any fanwork, with its tags, likes, bookmarks, comments and reports."""
    moderator = check_access(identity, min_role=UserRole.MODERATOR)

    fanwork = await _load_fanwork_for_moderation(db, fanwork_id)
    details = {
        "fanwork_id": fanwork_id,
        "title": fanwork.title,
        "author_id": fanwork.author_id,
        "reason": reason,
    }
    author_id = fanwork.author_id

    await purge_fanwork(db, fanwork)
    record_moderation_action(
        db,
        moderator.user_id,
        ModerationActionType.FANWORK_DELETE,
        target_user_id=author_id,
        details=details,
    )
    await db.commit()

    logger.info("fanwork_deleted_by_moderator", fanwork_id=fanwork_id, author_id=author_id)


async def moderator_delete_comment(
    db: AsyncSession, identity: Identity | None, comment_id: int, reason: str | None = None
) -> None:
    """Hard-delete any comment and the reports filed against it."""
    moderator = check_access(identity, min_role=UserRole.MODERATOR)

    comment = await get_comment(db, comment_id)
    details = {
        "comment_id": comment_id,
        "fanwork_id": comment.fanwork_id,
        "author_id": comment.user_id,
        "content": comment.content[:200],
        "reason": reason,
    }

    await purge_comment(db, comment)
    record_moderation_action(
        db,
        moderator.user_id,
        ModerationActionType.COMMENT_DELETE,
        fanwork_id=comment.fanwork_id,
        target_user_id=comment.user_id,
        details=details,
    )
    await db.commit()

    logger.info("comment_deleted_by_moderator", comment_id=comment_id)


# ===== Users =====


def _check_can_moderate_user(moderator: Identity, target: Users) -> None:
    if target.user_id == moderator.user_id:
        raise ForbiddenError("You cannot ban yourself")
    if UserRole.RANK.get(target.role, 0) >= UserRole.RANK[UserRole.MODERATOR] and (
        moderator.role != UserRole.ADMIN
    ):
        raise ForbiddenError("Only admins can ban moderators or admins")


async def ban_user(db: AsyncSession, identity: Identity | None, user_id: int, reason: str) -> Users:
    """
    Ban a user.

    The user's fanworks and comments stay as they are; hiding them is a
    separate moderator action.
    """
    moderator = check_access(identity, min_role=UserRole.MODERATOR)
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("A reason is required to ban a user")

    user = await get_user(db, user_id)
    _check_can_moderate_user(moderator, user)

    now = datetime.now(UTC)
    user.is_banned = True
    user.ban_reason = reason
    user.banned_at = now
    user.banned_by = moderator.user_id
    user.updated_at = now

    record_moderation_action(
        db,
        moderator.user_id,
        ModerationActionType.USER_BAN,
        target_user_id=user_id,
        details={"reason": reason},
    )
    await db.commit()
    await db.refresh(user)

    logger.info("user_banned", target_user_id=user_id, reason=reason)
    return user


async def unban_user(db: AsyncSession, identity: Identity | None, user_id: int) -> Users:
    """Lift a ban and clear its metadata."""
    moderator = check_access(identity, min_role=UserRole.MODERATOR)

    user = await get_user(db, user_id)
    _check_can_moderate_user(moderator, user)

    previous_reason = user.ban_reason
    user.is_banned = False
    user.ban_reason = None
    user.banned_at = None
    user.banned_by = None
    user.updated_at = datetime.now(UTC)

    record_moderation_action(
        db,
        moderator.user_id,
        ModerationActionType.USER_UNBAN,
        target_user_id=user_id,
        details={"previous_reason": previous_reason},
    )
    await db.commit()
    await db.refresh(user)

    logger.info("user_unbanned", target_user_id=user_id)
    return user
