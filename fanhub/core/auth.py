"""
Authentication dependencies for FastAPI route protection.

This module provides dependency functions for:
- Extracting the bearer credential from a request (header or cookie)
- Resolving it once into an Identity
- Protecting routes with the access chain from fanhub.core.access
"""

from collections.abc import Callable, Coroutine
from typing import Annotated, Any

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.config import UserRole
from fanhub.core.access import Identity, check_access
from fanhub.core.database import get_db
from fanhub.core.logging import set_user_context
from fanhub.core.security import verify_access_token
from fanhub.models.user import Users

bearer_scheme = HTTPBearer(auto_error=False)


async def resolve_identity(db: AsyncSession, token: str | None) -> Identity | None:
    """
    Resolve a credential into an Identity.

    Returns None when the token is missing or invalid, or when the user it
    names no longer exists or is inactive.
    """
    if not token:
        return None

    user_id = verify_access_token(token)
    if user_id is None:
        return None

    result = await db.execute(select(Users).where(Users.user_id == user_id))  # type: ignore[arg-type]
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        return None

    return Identity.from_user(user)


async def get_optional_identity(
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    access_token: Annotated[str | None, Cookie()] = None,
) -> Identity | None:
    """
    Resolve the caller, or None for anonymous requests.

    The Authorization header wins over the access_token cookie.
    """
    token = credentials.credentials if credentials else access_token
    identity = await resolve_identity(db, token)
    if identity is not None:
        set_user_context(identity.user_id)
    return identity


def require_access(
    min_role: str | None = None,
    age_gate: bool = False,
    allow_banned: bool = False,
) -> Callable[..., Coroutine[Any, Any, Identity]]:
    """
    Create a FastAPI dependency that runs the access chain.

    Example:
        @router.post("/admin/reports/{report_id}")
        async def review(
            moderator: Annotated[Identity, Depends(require_access(UserRole.MODERATOR))],
        ):
            ...

    Raises:
        UnauthorizedError: 401 if no valid credential
        ForbiddenError: 403 if banned, under-privileged or not age verified
    """

    async def access_checker(
        identity: Annotated[Identity | None, Depends(get_optional_identity)],
    ) -> Identity:
        return check_access(
            identity, min_role=min_role, age_gate=age_gate, allow_banned=allow_banned
        )

    return access_checker


# Type aliases for dependency injection
OptionalIdentity = Annotated[Identity | None, Depends(get_optional_identity)]
CurrentIdentity = Annotated[Identity, Depends(require_access(allow_banned=True))]
ActiveIdentity = Annotated[Identity, Depends(require_access())]
ModeratorIdentity = Annotated[Identity, Depends(require_access(UserRole.MODERATOR))]
AdminIdentity = Annotated[Identity, Depends(require_access(UserRole.ADMIN))]
