"""Tests for engagement counters computed at read time."""

import pytest

from fanhub.core.errors import NotFoundError
from fanhub.services.comments import create_comment, delete_comment
from fanhub.services.counters import get_counts
from fanhub.services.interactions import toggle_bookmark, toggle_like


class TestCounts:
    async def test_new_fanwork_has_zero_counts(self, db_session, make_user, make_fanwork):
        author = await make_user()
        fanwork = await make_fanwork(author)

        counts = await get_counts(db_session, fanwork.fanwork_id)
        assert (counts.likes, counts.comments, counts.bookmarks) == (0, 0, 0)

    async def test_counts_follow_relations(
        self, db_session, make_user, make_fanwork, identity_of
    ):
        author = await make_user()
        fans = [await make_user() for _ in range(3)]
        fanwork = await make_fanwork(author)
        fanwork_id = fanwork.fanwork_id

        for fan in fans:
            await toggle_like(db_session, identity_of(fan), fanwork_id)
        await toggle_bookmark(db_session, identity_of(fans[0]), fanwork_id)
        comment = await create_comment(db_session, identity_of(fans[1]), fanwork_id, "Lovely")
        await create_comment(db_session, identity_of(fans[2]), fanwork_id, "Agreed")

        counts = await get_counts(db_session, fanwork_id)
        assert (counts.likes, counts.comments, counts.bookmarks) == (3, 2, 1)

        # Undo some of it
        await toggle_like(db_session, identity_of(fans[0]), fanwork_id)
        await toggle_bookmark(db_session, identity_of(fans[0]), fanwork_id)
        await delete_comment(db_session, identity_of(fans[1]), comment.comment_id)

        counts = await get_counts(db_session, fanwork_id)
        assert (counts.likes, counts.comments, counts.bookmarks) == (2, 1, 0)

    async def test_counts_are_per_fanwork(
        self, db_session, make_user, make_fanwork, identity_of
    ):
        author = await make_user()
        fan = await make_user()
        liked = await make_fanwork(author, title="Liked")
        ignored = await make_fanwork(author, title="Ignored")

        await toggle_like(db_session, identity_of(fan), liked.fanwork_id)

        assert (await get_counts(db_session, liked.fanwork_id)).likes == 1
        assert (await get_counts(db_session, ignored.fanwork_id)).likes == 0

    async def test_missing_fanwork(self, db_session):
        with pytest.raises(NotFoundError):
            await get_counts(db_session, 999999)
