"""
Identity & access predicates.

A request resolves its credential once into an `Identity` (or None for
anonymous callers). Every gate in the application is expressed with the
predicates below, composed by `check_access` in a fixed order:

    credential -> ban -> role -> age verification

The chain short-circuits at the first failure, so a banned admin is rejected
as banned before any role is considered.
"""

from pydantic import BaseModel, ConfigDict

from fanhub.config import ContentRating, UserRole
from fanhub.core.errors import ForbiddenError, UnauthorizedError
from fanhub.models.fanwork import Fanworks
from fanhub.models.user import Users


class Identity(BaseModel):
    """Resolved caller for one request."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    role: str = UserRole.USER
    is_banned: bool = False
    age_verified: bool = False

    @classmethod
    def from_user(cls, user: Users) -> "Identity":
        assert user.user_id is not None
        return cls(
            user_id=user.user_id,
            role=user.role,
            is_banned=user.is_banned,
            age_verified=user.age_verified,
        )

    @property
    def rank(self) -> int:
        return UserRole.RANK.get(self.role, 0)

    @property
    def is_moderator(self) -> bool:
        """Moderators and admins."""
        return self.rank >= UserRole.RANK[UserRole.MODERATOR]


def require_authenticated(identity: Identity | None) -> Identity:
    """Fail with UnauthorizedError for anonymous callers."""
    if identity is None:
        raise UnauthorizedError("Not authenticated")
    return identity


def require_not_banned(identity: Identity) -> None:
    """Fail with ForbiddenError for banned callers, whatever their role."""
    if identity.is_banned:
        raise ForbiddenError("Your account has been banned")


def require_role(identity: Identity, minimum: str) -> None:
    """Fail with ForbiddenError when the caller ranks below `minimum`."""
    if minimum not in UserRole.VALUES:
        raise ValueError(f"Unknown role: {minimum}")
    if identity.rank < UserRole.RANK[minimum]:
        raise ForbiddenError(f"Requires {minimum} privileges")


def require_age_verified(identity: Identity) -> None:
    """Fail with ForbiddenError when the caller has not verified their age."""
    if not identity.age_verified:
        raise ForbiddenError("Age verification required")


def check_access(
    identity: Identity | None,
    *,
    min_role: str | None = None,
    age_gate: bool = False,
    allow_banned: bool = False,
) -> Identity:
    """
    Run the access chain and return the authenticated identity.

    Args:
        identity: Resolved caller, None when anonymous
        min_role: Minimum role required (None = any authenticated user)
        age_gate: Whether age verification is required
        allow_banned: Skip the ban check (self-service reads such as /auth/me)

    Raises:
        UnauthorizedError: No valid credential
        ForbiddenError: Banned, insufficient role, or not age verified
    """
    authenticated = require_authenticated(identity)
    if not allow_banned:
        require_not_banned(authenticated)
    if min_role is not None:
        require_role(authenticated, min_role)
    if age_gate:
        require_age_verified(authenticated)
    return authenticated


def is_age_gated(rating: str) -> bool:
    return rating in ContentRating.AGE_GATED


def can_view_fanwork(fanwork: Fanworks, identity: Identity | None) -> bool:
    """
    Check whether a caller may see a fanwork.

    Visibility rules:
    - Authors always see their own work
    - Hidden fanworks: moderators and admins only
    - Age-gated ratings: age-verified callers, moderators and admins
    """
    if identity is not None and fanwork.author_id == identity.user_id:
        return True

    if fanwork.is_hidden and (identity is None or not identity.is_moderator):
        return False

    if is_age_gated(fanwork.rating) and (
        identity is None or not (identity.age_verified or identity.is_moderator)
    ):
        return False

    return True
