"""
Tests for like/bookmark toggles.

Covers alternation, the at-most-one-row-per-pair guarantee, and convergence
when a concurrent request wins the insert race.
"""

from datetime import UTC, datetime

import pytest
from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.config import ContentRating, InteractionKind
from fanhub.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from fanhub.models.interaction import Bookmarks, Likes
from fanhub.services import interactions
from fanhub.services.interactions import (
    has_interaction,
    toggle_bookmark,
    toggle_interaction,
    toggle_like,
)


async def _count(db: AsyncSession, model, user_id: int, fanwork_id: int) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(model)
        .where(model.user_id == user_id, model.fanwork_id == fanwork_id)
    )
    return result.scalar_one()


class TestToggle:
    async def test_like_alternates(self, db_session, make_user, make_fanwork, identity_of):
        author = await make_user()
        fan = await make_user()
        fanwork = await make_fanwork(author)

        assert await toggle_like(db_session, identity_of(fan), fanwork.fanwork_id) is True
        assert await toggle_like(db_session, identity_of(fan), fanwork.fanwork_id) is False
        assert await toggle_like(db_session, identity_of(fan), fanwork.fanwork_id) is True

        assert await _count(db_session, Likes, fan.user_id, fanwork.fanwork_id) == 1
        assert await has_interaction(
            db_session, fan.user_id, fanwork.fanwork_id, InteractionKind.LIKE
        )

    async def test_bookmark_independent_of_like(
        self, db_session, make_user, make_fanwork, identity_of
    ):
        author = await make_user()
        fan = await make_user()
        fanwork = await make_fanwork(author)

        assert await toggle_bookmark(db_session, identity_of(fan), fanwork.fanwork_id) is True
        assert not await has_interaction(
            db_session, fan.user_id, fanwork.fanwork_id, InteractionKind.LIKE
        )
        assert await _count(db_session, Bookmarks, fan.user_id, fanwork.fanwork_id) == 1

    async def test_authors_can_like_their_own_work(
        self, db_session, make_user, make_fanwork, identity_of
    ):
        author = await make_user()
        fanwork = await make_fanwork(author)
        assert await toggle_like(db_session, identity_of(author), fanwork.fanwork_id) is True

    async def test_missing_fanwork(self, db_session, make_user, identity_of):
        fan = await make_user()
        with pytest.raises(NotFoundError):
            await toggle_like(db_session, identity_of(fan), 999999)

    async def test_hidden_fanwork_is_not_found_for_everyone(
        self, db_session, make_user, make_fanwork, identity_of
    ):
        author = await make_user()
        fanwork = await make_fanwork(author, is_hidden=True, moderation_reason="spam")

        with pytest.raises(NotFoundError):
            await toggle_like(db_session, identity_of(author), fanwork.fanwork_id)
        assert await _count(db_session, Likes, author.user_id, fanwork.fanwork_id) == 0

    async def test_anonymous_and_banned_rejected(
        self, db_session, make_user, make_fanwork, identity_of
    ):
        author = await make_user()
        banned = await make_user(is_banned=True)
        fanwork = await make_fanwork(author)

        with pytest.raises(UnauthorizedError):
            await toggle_like(db_session, None, fanwork.fanwork_id)
        with pytest.raises(ForbiddenError):
            await toggle_bookmark(db_session, identity_of(banned), fanwork.fanwork_id)

    async def test_age_gated_work_requires_verification(
        self, db_session, make_user, make_fanwork, identity_of
    ):
        author = await make_user()
        fan = await make_user()
        verified = await make_user(age_verified=True)
        fanwork = await make_fanwork(author, rating=ContentRating.EXPLICIT)

        with pytest.raises(ForbiddenError):
            await toggle_like(db_session, identity_of(fan), fanwork.fanwork_id)
        with pytest.raises(ForbiddenError):
            await toggle_bookmark(db_session, identity_of(fan), fanwork.fanwork_id)
        assert await _count(db_session, Likes, fan.user_id, fanwork.fanwork_id) == 0

        assert await toggle_like(db_session, identity_of(verified), fanwork.fanwork_id) is True
        # Authors are exempt on their own work
        assert await toggle_like(db_session, identity_of(author), fanwork.fanwork_id) is True

    async def test_unknown_kind(self, db_session, make_user, make_fanwork, identity_of):
        author = await make_user()
        fanwork = await make_fanwork(author)
        with pytest.raises(ValidationError):
            await toggle_interaction(
                db_session, identity_of(author), fanwork.fanwork_id, "follow"
            )


class TestConcurrentToggle:
    async def test_lost_insert_race_reports_present(
        self, db_session, make_user, make_fanwork, identity_of, monkeypatch
    ):
        """
        A concurrent request inserted the row between our existence check and
        our insert. The toggle must report True and leave exactly one row.
        """
        author = await make_user()
        fan = await make_user()
        fanwork = await make_fanwork(author)

        # The competing request's row, written outside this session's identity map
        await db_session.execute(
            insert(Likes).values(
                user_id=fan.user_id, fanwork_id=fanwork.fanwork_id, created_at=datetime.now(UTC)
            )
        )
        await db_session.commit()

        real_exists = interactions._interaction_exists
        calls = {"n": 0}

        async def stale_first_check(db, model, user_id, fanwork_id):
            calls["n"] += 1
            if calls["n"] == 1:
                return False
            return await real_exists(db, model, user_id, fanwork_id)

        monkeypatch.setattr(interactions, "_interaction_exists", stale_first_check)

        result = await toggle_interaction(
            db_session, identity_of(fan), fanwork.fanwork_id, InteractionKind.LIKE
        )

        assert result is True
        assert await _count(db_session, Likes, fan.user_id, fanwork.fanwork_id) == 1

    async def test_session_usable_after_conflict(
        self, db_session, make_user, make_fanwork, identity_of, monkeypatch
    ):
        author = await make_user()
        fan = await make_user()
        fanwork = await make_fanwork(author)
        await db_session.execute(
            insert(Bookmarks).values(
                user_id=fan.user_id, fanwork_id=fanwork.fanwork_id, created_at=datetime.now(UTC)
            )
        )
        await db_session.commit()

        real_exists = interactions._interaction_exists
        calls = {"n": 0}

        async def stale_first_check(db, model, user_id, fanwork_id):
            calls["n"] += 1
            if calls["n"] == 1:
                return False
            return await real_exists(db, model, user_id, fanwork_id)

        monkeypatch.setattr(interactions, "_interaction_exists", stale_first_check)
        assert await toggle_interaction(
            db_session, identity_of(fan), fanwork.fanwork_id, InteractionKind.BOOKMARK
        )

        # The next toggle sees the row and removes it
        assert (
            await toggle_interaction(
                db_session, identity_of(fan), fanwork.fanwork_id, InteractionKind.BOOKMARK
            )
            is False
        )
        assert await _count(db_session, Bookmarks, fan.user_id, fanwork.fanwork_id) == 0

    async def test_conflict_reports_state_found_on_reread(
        self, db_session, make_user, make_fanwork, identity_of, monkeypatch
    ):
        """
        The competing row was removed again before the re-read, so the toggle
        reports the pair as absent.
        """
        author = await make_user()
        fan = await make_user()
        fanwork = await make_fanwork(author)

        async def conflicting_insert(db, model, user_id, fanwork_id):
            raise ConflictError("Interaction already exists")

        monkeypatch.setattr(interactions, "_insert_interaction", conflicting_insert)

        result = await toggle_interaction(
            db_session, identity_of(fan), fanwork.fanwork_id, InteractionKind.LIKE
        )

        assert result is False
        assert await _count(db_session, Likes, fan.user_id, fanwork.fanwork_id) == 0
