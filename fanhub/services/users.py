"""
Account service: registration, login, profile and account-state changes.
"""

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.config import ModerationActionType, UserRole
from fanhub.core.access import Identity, check_access
from fanhub.core.errors import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from fanhub.core.logging import get_logger
from fanhub.core.security import get_password_hash, verify_password
from fanhub.models.user import Users
from fanhub.schemas.user import UserUpdate
from fanhub.services.audit import record_moderation_action

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6
MAX_USERNAME_LENGTH = 50


async def get_user(db: AsyncSession, user_id: int) -> Users:
    """
    Load a user by id.

    Raises:
        NotFoundError: No such user
    """
    result = await db.execute(select(Users).where(Users.user_id == user_id))  # type: ignore[arg-type]
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


async def get_users_by_ids(db: AsyncSession, user_ids: set[int]) -> dict[int, Users]:
    """Fetch several users in one query, keyed by id."""
    if not user_ids:
        return {}
    result = await db.execute(select(Users).where(Users.user_id.in_(list(user_ids))))  # type: ignore[union-attr]
    return {user.user_id: user for user in result.scalars().all()}  # type: ignore[misc]


async def register_user(
    db: AsyncSession,
    email: str,
    username: str,
    password: str,
    first_name: str | None = None,
    last_name: str | None = None,
) -> Users:
    """
    Create an account with a bcrypt-hashed password.

    Raises:
        ValidationError: Bad username/password, or email/username already in use
    """
    email = email.strip().lower()
    username = username.strip()
    if not username or len(username) > MAX_USERNAME_LENGTH:
        raise ValidationError(f"Username must be 1-{MAX_USERNAME_LENGTH} characters")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    existing = await db.execute(select(Users.user_id).where(Users.email == email))  # type: ignore[call-overload]
    if existing.first() is not None:
        raise ValidationError("Email already registered")
    existing = await db.execute(select(Users.user_id).where(Users.username == username))  # type: ignore[call-overload]
    if existing.first() is not None:
        raise ValidationError("Username already taken")

    user = Users(
        email=email,
        username=username,
        password_hash=get_password_hash(password),
        first_name=first_name,
        last_name=last_name,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email/username
        await db.rollback()
        raise ValidationError("Email or username already registered") from None
    await db.refresh(user)

    logger.info("user_registered", user_id=user.user_id, username=username)
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> Users:
    """
    Check login credentials.

    Banned users may still log in; the access chain blocks their actions.

    Raises:
        UnauthorizedError: Unknown email, inactive account or wrong password
    """
    result = await db.execute(select(Users).where(Users.email == email.strip().lower()))  # type: ignore[arg-type]
    user = result.scalar_one_or_none()

    if user is None or not user.is_active or not verify_password(password, user.password_hash):
        logger.info("login_failed", email=email)
        raise UnauthorizedError("Invalid credentials")

    logger.info("login_succeeded", user_id=user.user_id)
    return user


async def update_profile(db: AsyncSession, identity: Identity | None, changes: UserUpdate) -> Users:
    """Self-service profile edit. Banned users cannot edit their profile."""
    actor = check_access(identity)
    user = await get_user(db, actor.user_id)

    for field, value in changes.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    user.updated_at = datetime.now(UTC)

    await db.commit()
    await db.refresh(user)
    logger.info("profile_updated", user_id=user.user_id)
    return user


async def confirm_age(db: AsyncSession, identity: Identity | None, confirmed: bool) -> Users:
    """
    Record the caller's self-attested confirmation that they are an adult.

    Raises:
        ValidationError: confirmed is false
    """
    actor = check_access(identity, allow_banned=True)
    if not confirmed:
        raise ValidationError("Age confirmation required")

    user = await get_user(db, actor.user_id)
    if not user.age_verified:
        user.age_verified = True
        user.age_verified_at = datetime.now(UTC)
        user.updated_at = user.age_verified_at
        await db.commit()
        await db.refresh(user)
        logger.info("age_confirmed", user_id=user.user_id)
    return user


async def set_user_role(
    db: AsyncSession, identity: Identity | None, user_id: int, role: str
) -> Users:
    """
    Change a user's role. Admin only; admins cannot change their own role.

    Raises:
        ValidationError: Unknown role
        ForbiddenError: Caller is not an admin, or targets themselves
        NotFoundError: No such user
    """
    actor = check_access(identity, min_role=UserRole.ADMIN)
    if role not in UserRole.VALUES:
        raise ValidationError(f"Unknown role: {role}")
    if user_id == actor.user_id:
        raise ForbiddenError("You cannot change your own role")

    user = await get_user(db, user_id)
    previous = user.role
    user.role = role
    user.updated_at = datetime.now(UTC)

    record_moderation_action(
        db,
        actor.user_id,
        ModerationActionType.USER_ROLE,
        target_user_id=user_id,
        details={"previous": previous, "role": role},
    )
    await db.commit()
    await db.refresh(user)

    logger.info("user_role_changed", target_user_id=user_id, previous=previous, role=role)
    return user


async def set_age_verified(
    db: AsyncSession, identity: Identity | None, user_id: int, verified: bool
) -> Users:
    """Set or clear a user's age verification. Moderator or higher."""
    actor = check_access(identity, min_role=UserRole.MODERATOR)
    user = await get_user(db, user_id)

    previous = user.age_verified
    user.age_verified = verified
    user.age_verified_at = datetime.now(UTC) if verified else None
    user.updated_at = datetime.now(UTC)

    record_moderation_action(
        db,
        actor.user_id,
        ModerationActionType.USER_AGE_VERIFY,
        target_user_id=user_id,
        details={"previous": previous, "age_verified": verified},
    )
    await db.commit()
    await db.refresh(user)

    logger.info("user_age_verification_set", target_user_id=user_id, age_verified=verified)
    return user
