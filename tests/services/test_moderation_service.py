"""
Tests for the moderation lifecycle: reports, review, hiding and bans.
"""

import pytest
from sqlalchemy import select

from fanhub.config import ModerationActionType, ReportStatus, UserRole
from fanhub.core.errors import (
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from fanhub.models.fanwork import Fanworks
from fanhub.models.moderation_action import ModerationActions
from fanhub.models.report import Reports
from fanhub.schemas.fanwork import FanworkFilters
from fanhub.services import moderation
from fanhub.services.comments import create_comment
from fanhub.services.fanworks import get_fanwork, list_fanworks


async def _actions(db, action_type: str) -> list[ModerationActions]:
    result = await db.execute(
        select(ModerationActions).where(ModerationActions.action_type == action_type)
    )
    return list(result.scalars().all())


class TestCreateReport:
    async def test_report_fanwork(self, db_session, make_user, make_fanwork, identity_of):
        author = await make_user()
        reporter = await make_user()
        fanwork = await make_fanwork(author)

        report = await moderation.create_report(
            db_session,
            identity_of(reporter),
            fanwork_id=fanwork.fanwork_id,
            reason="spam",
            description="  Link farm  ",
        )

        assert report.status == ReportStatus.PENDING
        assert report.reporter_id == reporter.user_id
        assert report.description == "Link farm"
        assert report.reviewed_by is None

        # Filing a report changes nothing on the target
        await db_session.refresh(fanwork)
        assert fanwork.is_hidden is False

    async def test_requires_exactly_one_target(
        self, db_session, make_user, make_fanwork, identity_of
    ):
        author = await make_user()
        reporter = await make_user()
        fanwork = await make_fanwork(author)

        with pytest.raises(ValidationError, match="exactly one"):
            await moderation.create_report(db_session, identity_of(reporter), reason="spam")
        with pytest.raises(ValidationError, match="exactly one"):
            await moderation.create_report(
                db_session,
                identity_of(reporter),
                fanwork_id=fanwork.fanwork_id,
                reported_user_id=author.user_id,
                reason="spam",
            )

    @pytest.mark.parametrize("reason", [None, "", "   ", "boring"])
    async def test_reason_required_and_known(
        self, db_session, make_user, make_fanwork, identity_of, reason
    ):
        author = await make_user()
        reporter = await make_user()
        fanwork = await make_fanwork(author)

        with pytest.raises(ValidationError):
            await moderation.create_report(
                db_session, identity_of(reporter), fanwork_id=fanwork.fanwork_id, reason=reason
            )

    async def test_missing_targets(self, db_session, make_user, identity_of):
        reporter = await make_user()
        for target in ("fanwork_id", "comment_id", "reported_user_id"):
            with pytest.raises(NotFoundError):
                await moderation.create_report(
                    db_session, identity_of(reporter), reason="other", **{target: 999999}
                )

    async def test_cannot_report_yourself(self, db_session, make_user, identity_of):
        user = await make_user()
        with pytest.raises(ValidationError, match="yourself"):
            await moderation.create_report(
                db_session, identity_of(user), reported_user_id=user.user_id, reason="other"
            )

    async def test_report_comment(self, db_session, make_user, make_fanwork, identity_of):
        author = await make_user()
        reporter = await make_user()
        fanwork = await make_fanwork(author)
        comment = await create_comment(
            db_session, identity_of(author), fanwork.fanwork_id, "rude words"
        )

        report = await moderation.create_report(
            db_session, identity_of(reporter), comment_id=comment.comment_id, reason="harassment"
        )
        assert report.comment_id == comment.comment_id
        assert report.fanwork_id is None


class TestReviewReport:
    async def _pending_report(self, db_session, make_user, make_fanwork, identity_of) -> Reports:
        author = await make_user()
        reporter = await make_user()
        fanwork = await make_fanwork(author)
        return await moderation.create_report(
            db_session, identity_of(reporter), fanwork_id=fanwork.fanwork_id, reason="spam"
        )

    async def test_review_sets_reviewer(self, db_session, make_user, make_fanwork, identity_of):
        report = await self._pending_report(db_session, make_user, make_fanwork, identity_of)
        mod = await make_user("mod", role=UserRole.MODERATOR)

        reviewed = await moderation.review_report(
            db_session, identity_of(mod), report.report_id, ReportStatus.RESOLVED, "Removed link"
        )

        assert reviewed.status == ReportStatus.RESOLVED
        assert reviewed.reviewed_by == mod.user_id
        assert reviewed.reviewed_at is not None
        assert reviewed.moderation_action == "Removed link"

        audit = await _actions(db_session, ModerationActionType.REPORT_REVIEW)
        assert len(audit) == 1
        assert audit[0].report_id == report.report_id
        assert audit[0].actor_id == mod.user_id

    @pytest.mark.parametrize("first", sorted(ReportStatus.TERMINAL))
    async def test_terminal_states_are_final(
        self, db_session, make_user, make_fanwork, identity_of, first
    ):
        report = await self._pending_report(db_session, make_user, make_fanwork, identity_of)
        mod_a = await make_user("mod_a", role=UserRole.MODERATOR)
        mod_b = await make_user("mod_b", role=UserRole.ADMIN)

        await moderation.review_report(db_session, identity_of(mod_a), report.report_id, first)

        with pytest.raises(InvalidTransitionError):
            await moderation.review_report(
                db_session, identity_of(mod_b), report.report_id, ReportStatus.DISMISSED
            )

        # The first review's metadata is untouched
        current = await moderation.get_report(db_session, identity_of(mod_b), report.report_id)
        assert current.status == first
        assert current.reviewed_by == mod_a.user_id
        assert len(await _actions(db_session, ModerationActionType.REPORT_REVIEW)) == 1

    async def test_pending_is_not_a_review_target(
        self, db_session, make_user, make_fanwork, identity_of
    ):
        report = await self._pending_report(db_session, make_user, make_fanwork, identity_of)
        mod = await make_user("mod", role=UserRole.MODERATOR)
        with pytest.raises(ValidationError):
            await moderation.review_report(
                db_session, identity_of(mod), report.report_id, ReportStatus.PENDING
            )

    async def test_missing_report(self, db_session, make_user, identity_of):
        mod = await make_user("mod", role=UserRole.MODERATOR)
        with pytest.raises(NotFoundError):
            await moderation.review_report(
                db_session, identity_of(mod), 999999, ReportStatus.DISMISSED
            )

    async def test_regular_users_cannot_review(
        self, db_session, make_user, make_fanwork, identity_of
    ):
        report = await self._pending_report(db_session, make_user, make_fanwork, identity_of)
        user = await make_user()
        with pytest.raises(ForbiddenError):
            await moderation.review_report(
                db_session, identity_of(user), report.report_id, ReportStatus.DISMISSED
            )

    async def test_list_filters_by_status(self, db_session, make_user, make_fanwork, identity_of):
        first = await self._pending_report(db_session, make_user, make_fanwork, identity_of)
        await self._pending_report(db_session, make_user, make_fanwork, identity_of)
        mod = await make_user("mod", role=UserRole.MODERATOR)
        await moderation.review_report(
            db_session, identity_of(mod), first.report_id, ReportStatus.DISMISSED
        )

        pending, total = await moderation.list_reports(
            db_session, identity_of(mod), status=ReportStatus.PENDING
        )
        assert total == 1
        assert first.report_id not in [r.report_id for r in pending]

        _, all_total = await moderation.list_reports(db_session, identity_of(mod))
        assert all_total == 2

        with pytest.raises(ValidationError):
            await moderation.list_reports(db_session, identity_of(mod), status="archived")


class TestReportSummary:
    async def test_summary_is_derived(self, db_session, make_user, make_fanwork, identity_of):
        author = await make_user()
        reporter = await make_user()
        mod = await make_user("mod", role=UserRole.MODERATOR)
        fanwork = await make_fanwork(author)

        summary = await moderation.get_report_summary(db_session, fanwork.fanwork_id)
        assert summary.report_count == 0
        assert summary.is_reported is False

        report = await moderation.create_report(
            db_session, identity_of(reporter), fanwork_id=fanwork.fanwork_id, reason="spam"
        )
        summary = await moderation.get_report_summary(db_session, fanwork.fanwork_id)
        assert summary.report_count == 1
        assert summary.is_reported is True

        await moderation.review_report(
            db_session, identity_of(mod), report.report_id, ReportStatus.DISMISSED
        )
        summary = await moderation.get_report_summary(db_session, fanwork.fanwork_id)
        assert summary.report_count == 1
        assert summary.is_reported is False


class TestHideFanwork:
    async def test_hidden_work_leaves_public_views(
        self, db_session, make_user, make_fanwork, identity_of
    ):
        author = await make_user()
        viewer = await make_user()
        mod = await make_user("mod", role=UserRole.MODERATOR)
        fanwork = await make_fanwork(author, title="Hide me")

        hidden = await moderation.hide_fanwork(
            db_session, identity_of(mod), fanwork.fanwork_id, "Stolen art"
        )
        assert hidden.is_hidden is True
        assert hidden.moderated_by == mod.user_id
        assert hidden.moderation_reason == "Stolen art"

        items, total = await list_fanworks(db_session, identity_of(viewer), FanworkFilters())
        assert total == 0
        with pytest.raises(NotFoundError):
            await get_fanwork(db_session, fanwork.fanwork_id, identity_of(viewer))
        with pytest.raises(NotFoundError):
            await get_fanwork(db_session, fanwork.fanwork_id, None)

        # Author and moderators still see it
        assert (await get_fanwork(db_session, fanwork.fanwork_id, identity_of(author))).is_hidden
        _, mod_total = await list_fanworks(db_session, identity_of(mod), FanworkFilters())
        assert mod_total == 1

        audit = await _actions(db_session, ModerationActionType.FANWORK_HIDE)
        assert audit[0].fanwork_id == fanwork.fanwork_id
        assert audit[0].details == {"reason": "Stolen art"}

    async def test_unhide_clears_metadata(self, db_session, make_user, make_fanwork, identity_of):
        author = await make_user()
        mod = await make_user("mod", role=UserRole.MODERATOR)
        fanwork = await make_fanwork(author)

        await moderation.hide_fanwork(db_session, identity_of(mod), fanwork.fanwork_id, "Spam")
        shown = await moderation.unhide_fanwork(db_session, identity_of(mod), fanwork.fanwork_id)

        assert shown.is_hidden is False
        assert shown.moderation_reason is None
        assert shown.moderated_by is None

    async def test_reason_required(self, db_session, make_user, make_fanwork, identity_of):
        author = await make_user()
        mod = await make_user("mod", role=UserRole.MODERATOR)
        fanwork = await make_fanwork(author)
        with pytest.raises(ValidationError):
            await moderation.hide_fanwork(db_session, identity_of(mod), fanwork.fanwork_id, "  ")

    async def test_moderator_delete_is_audited(
        self, db_session, make_user, make_fanwork, identity_of
    ):
        author = await make_user()
        reporter = await make_user()
        mod = await make_user("mod", role=UserRole.MODERATOR)
        fanwork = await make_fanwork(author, title="Gone")
        fanwork_id = fanwork.fanwork_id
        await moderation.create_report(
            db_session, identity_of(reporter), fanwork_id=fanwork_id, reason="copyright"
        )

        await moderation.moderator_delete_fanwork(
            db_session, identity_of(mod), fanwork_id, reason="DMCA"
        )

        result = await db_session.execute(select(Fanworks).where(Fanworks.fanwork_id == fanwork_id))
        assert result.scalar_one_or_none() is None
        reports = await db_session.execute(select(Reports).where(Reports.fanwork_id == fanwork_id))
        assert reports.scalars().all() == []

        audit = await _actions(db_session, ModerationActionType.FANWORK_DELETE)
        assert len(audit) == 1
        assert audit[0].fanwork_id is None
        assert audit[0].details["fanwork_id"] == fanwork_id
        assert audit[0].details["title"] == "Gone"
        assert audit[0].details["reason"] == "DMCA"


class TestBans:
    async def test_ban_does_not_cascade(self, db_session, make_user, make_fanwork, identity_of):
        author = await make_user()
        mod = await make_user("mod", role=UserRole.MODERATOR)
        fanwork = await make_fanwork(author)
        comment = await create_comment(db_session, identity_of(author), fanwork.fanwork_id, "hi")

        banned = await moderation.ban_user(db_session, identity_of(mod), author.user_id, "Spam")

        assert banned.is_banned is True
        assert banned.ban_reason == "Spam"
        assert banned.banned_by == mod.user_id
        assert banned.banned_at is not None

        # Existing content stays visible
        visible = await get_fanwork(db_session, fanwork.fanwork_id, None)
        assert visible.is_hidden is False
        await db_session.refresh(comment)
        assert comment.content == "hi"

    async def test_banned_user_cannot_write(
        self, db_session, make_user, make_fanwork, identity_of
    ):
        author = await make_user()
        mod = await make_user("mod", role=UserRole.MODERATOR)
        fanwork = await make_fanwork(author)
        banned = await moderation.ban_user(db_session, identity_of(mod), author.user_id, "Spam")

        with pytest.raises(ForbiddenError):
            await create_comment(db_session, identity_of(banned), fanwork.fanwork_id, "still here")

    async def test_unban(self, db_session, make_user, identity_of):
        user = await make_user(is_banned=True)
        mod = await make_user("mod", role=UserRole.MODERATOR)

        unbanned = await moderation.unban_user(db_session, identity_of(mod), user.user_id)
        assert unbanned.is_banned is False
        assert unbanned.ban_reason is None
        assert unbanned.banned_by is None
        assert len(await _actions(db_session, ModerationActionType.USER_UNBAN)) == 1

    async def test_moderators_cannot_ban_staff(self, db_session, make_user, identity_of):
        mod = await make_user("mod", role=UserRole.MODERATOR)
        other_mod = await make_user("other_mod", role=UserRole.MODERATOR)
        admin = await make_user("admin", role=UserRole.ADMIN)

        with pytest.raises(ForbiddenError):
            await moderation.ban_user(db_session, identity_of(mod), other_mod.user_id, "x")
        with pytest.raises(ForbiddenError):
            await moderation.ban_user(db_session, identity_of(mod), admin.user_id, "x")

        # Admins can
        banned = await moderation.ban_user(
            db_session, identity_of(admin), other_mod.user_id, "Abuse"
        )
        assert banned.is_banned is True

    async def test_cannot_ban_yourself(self, db_session, make_user, identity_of):
        admin = await make_user("admin", role=UserRole.ADMIN)
        with pytest.raises(ForbiddenError):
            await moderation.ban_user(db_session, identity_of(admin), admin.user_id, "x")

    async def test_banned_moderator_cannot_moderate(self, db_session, make_user, identity_of):
        mod = await make_user("mod", role=UserRole.MODERATOR, is_banned=True)
        user = await make_user()
        with pytest.raises(ForbiddenError, match="banned"):
            await moderation.ban_user(db_session, identity_of(mod), user.user_id, "x")
