"""Tests for the identity and access predicates."""

import pytest

from fanhub.config import ContentRating, UserRole
from fanhub.core.access import (
    Identity,
    can_view_fanwork,
    check_access,
    is_age_gated,
    require_role,
)
from fanhub.core.errors import ForbiddenError, UnauthorizedError
from fanhub.models.fanwork import Fanworks


def _fanwork(author_id: int = 1, *, rating: str = ContentRating.ALL_AGES, hidden: bool = False):
    return Fanworks(
        fanwork_id=10,
        title="Work",
        type="artwork",
        rating=rating,
        author_id=author_id,
        is_hidden=hidden,
    )


@pytest.mark.unit
class TestCheckAccess:
    """The access chain runs credential -> ban -> role -> age."""

    def test_anonymous_is_unauthorized(self) -> None:
        with pytest.raises(UnauthorizedError):
            check_access(None)

    def test_authenticated_user_passes(self) -> None:
        identity = Identity(user_id=1)
        assert check_access(identity) is identity

    def test_banned_user_is_forbidden(self) -> None:
        with pytest.raises(ForbiddenError, match="banned"):
            check_access(Identity(user_id=1, is_banned=True))

    def test_banned_user_allowed_for_self_service(self) -> None:
        identity = Identity(user_id=1, is_banned=True)
        assert check_access(identity, allow_banned=True) is identity

    def test_ban_checked_before_role(self) -> None:
        """A banned admin is rejected as banned, not as under-privileged."""
        banned_admin = Identity(user_id=1, role=UserRole.ADMIN, is_banned=True)
        with pytest.raises(ForbiddenError, match="banned"):
            check_access(banned_admin, min_role=UserRole.ADMIN)

    def test_role_checked_before_age(self) -> None:
        with pytest.raises(ForbiddenError, match="moderator"):
            check_access(Identity(user_id=1), min_role=UserRole.MODERATOR, age_gate=True)

    def test_age_gate(self) -> None:
        with pytest.raises(ForbiddenError, match="Age verification"):
            check_access(Identity(user_id=1), age_gate=True)
        verified = Identity(user_id=1, age_verified=True)
        assert check_access(verified, age_gate=True) is verified

    @pytest.mark.parametrize(
        "role,minimum,allowed",
        [
            (UserRole.USER, UserRole.MODERATOR, False),
            (UserRole.MODERATOR, UserRole.MODERATOR, True),
            (UserRole.ADMIN, UserRole.MODERATOR, True),
            (UserRole.MODERATOR, UserRole.ADMIN, False),
            (UserRole.ADMIN, UserRole.ADMIN, True),
        ],
    )
    def test_role_ranking(self, role: str, minimum: str, allowed: bool) -> None:
        identity = Identity(user_id=1, role=role)
        if allowed:
            require_role(identity, minimum)
        else:
            with pytest.raises(ForbiddenError):
                require_role(identity, minimum)

    def test_unknown_minimum_role_is_a_programming_error(self) -> None:
        with pytest.raises(ValueError):
            require_role(Identity(user_id=1), "superuser")


@pytest.mark.unit
class TestCanViewFanwork:
    def test_public_work_visible_to_everyone(self) -> None:
        fanwork = _fanwork()
        assert can_view_fanwork(fanwork, None)
        assert can_view_fanwork(fanwork, Identity(user_id=2))

    def test_hidden_work(self) -> None:
        fanwork = _fanwork(author_id=1, hidden=True)
        assert not can_view_fanwork(fanwork, None)
        assert not can_view_fanwork(fanwork, Identity(user_id=2))
        assert can_view_fanwork(fanwork, Identity(user_id=1))
        assert can_view_fanwork(fanwork, Identity(user_id=3, role=UserRole.MODERATOR))
        assert can_view_fanwork(fanwork, Identity(user_id=4, role=UserRole.ADMIN))

    @pytest.mark.parametrize("rating", [ContentRating.MATURE, ContentRating.EXPLICIT])
    def test_age_gated_work(self, rating: str) -> None:
        fanwork = _fanwork(author_id=1, rating=rating)
        assert not can_view_fanwork(fanwork, None)
        assert not can_view_fanwork(fanwork, Identity(user_id=2))
        assert can_view_fanwork(fanwork, Identity(user_id=2, age_verified=True))
        assert can_view_fanwork(fanwork, Identity(user_id=1))

    def test_hidden_gated_work_visible_to_unverified_moderator(self) -> None:
        fanwork = _fanwork(author_id=1, hidden=True, rating=ContentRating.MATURE)
        assert can_view_fanwork(fanwork, Identity(user_id=3, role=UserRole.MODERATOR))
        assert not can_view_fanwork(fanwork, Identity(user_id=2, age_verified=True))

    def test_teen_is_not_age_gated(self) -> None:
        assert not is_age_gated(ContentRating.TEEN)
        assert not is_age_gated(ContentRating.ALL_AGES)
        assert is_age_gated(ContentRating.MATURE)
        assert is_age_gated(ContentRating.EXPLICIT)


@pytest.mark.unit
class TestIdentity:
    def test_moderator_flag(self) -> None:
        assert not Identity(user_id=1).is_moderator
        assert Identity(user_id=1, role=UserRole.MODERATOR).is_moderator
        assert Identity(user_id=1, role=UserRole.ADMIN).is_moderator

    def test_unknown_role_ranks_lowest(self) -> None:
        assert Identity(user_id=1, role="ghost").rank == 0
