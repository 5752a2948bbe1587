"""
Like and bookmark toggles.

A toggle flips the presence of a (user, fanwork) row. The composite primary
key on each relation table guarantees at most one row per pair. When two
requests from the same user race to insert, the loser's insert fails on
that key; the toggle re-reads the pair and reports its current state
instead of surfacing an error.
"""

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.config import InteractionKind
from fanhub.core.access import Identity, check_access, is_age_gated
from fanhub.core.errors import ConflictError, NotFoundError, ValidationError
from fanhub.core.logging import get_logger
from fanhub.models.fanwork import Fanworks
from fanhub.models.interaction import Bookmarks, Likes

logger = get_logger(__name__)

INTERACTION_MODELS: dict[str, type[Likes] | type[Bookmarks]] = {
    InteractionKind.LIKE: Likes,
    InteractionKind.BOOKMARK: Bookmarks,
}


def _model_for(kind: str) -> type[Likes] | type[Bookmarks]:
    model = INTERACTION_MODELS.get(kind)
    if model is None:
        raise ValidationError(f"Unknown interaction kind: {kind}")
    return model


async def _interaction_exists(
    db: AsyncSession, model: type[Likes] | type[Bookmarks], user_id: int, fanwork_id: int
) -> bool:
    result = await db.execute(
        select(model.user_id).where(  # type: ignore[call-overload]
            model.user_id == user_id,
            model.fanwork_id == fanwork_id,
        )
    )
    return result.first() is not None


async def _insert_interaction(
    db: AsyncSession, model: type[Likes] | type[Bookmarks], user_id: int, fanwork_id: int
) -> None:
    """
    Insert the relation row inside a savepoint.

    Raises:
        ConflictError: The row already exists (composite key violation)
    """
    try:
        async with db.begin_nested():
            db.add(model(user_id=user_id, fanwork_id=fanwork_id))
    except IntegrityError as e:
        raise ConflictError("Interaction already exists") from e


async def toggle_interaction(db: AsyncSession, actor: Identity, fanwork_id: int, kind: str) -> bool:
    """
    Flip a like or bookmark.

    Authentication and ban checks happen before this is called. Age-gated
    fanworks additionally require a verified age unless the caller is the
    author.

    Args:
        db: Database session
        actor: Acting user
        fanwork_id: Target fanwork
        kind: InteractionKind value

    Returns:
        True if the relation now exists, False if it is absent

    Raises:
        ValidationError: Unknown kind
        NotFoundError: Fanwork missing or hidden
        ForbiddenError: Age-gated fanwork and the caller is not age verified
    """
    model = _model_for(kind)
    user_id = actor.user_id

    result = await db.execute(
        select(Fanworks.is_hidden, Fanworks.rating, Fanworks.author_id).where(  # type: ignore[call-overload]
            Fanworks.fanwork_id == fanwork_id
        )
    )
    row = result.first()
    if row is None or row.is_hidden:
        raise NotFoundError("Fanwork not found")
    if row.author_id != user_id and is_age_gated(row.rating):
        check_access(actor, age_gate=True)

    if await _interaction_exists(db, model, user_id, fanwork_id):
        deleted = await db.execute(
            delete(model).where(
                model.user_id == user_id,  # type: ignore[arg-type]
                model.fanwork_id == fanwork_id,  # type: ignore[arg-type]
            )
        )
        await db.commit()
        logger.info(
            "interaction_removed",
            kind=kind,
            user_id=user_id,
            fanwork_id=fanwork_id,
            rows=deleted.rowcount,  # type: ignore[attr-defined]
        )
        return False

    try:
        await _insert_interaction(db, model, user_id, fanwork_id)
    except ConflictError:
        # A concurrent request inserted the same row first
        logger.info("interaction_toggle_conflict", kind=kind, user_id=user_id, fanwork_id=fanwork_id)
        present = await _interaction_exists(db, model, user_id, fanwork_id)
        await db.commit()
        if not present:
            logger.warning(
                "interaction_missing_after_conflict",
                kind=kind,
                user_id=user_id,
                fanwork_id=fanwork_id,
            )
        return present

    await db.commit()
    logger.info("interaction_added", kind=kind, user_id=user_id, fanwork_id=fanwork_id)
    return True


async def toggle_like(db: AsyncSession, identity: Identity | None, fanwork_id: int) -> bool:
    """Toggle the caller's like. Requires an authenticated, non-banned caller."""
    actor = check_access(identity)
    return await toggle_interaction(db, actor, fanwork_id, InteractionKind.LIKE)


async def toggle_bookmark(db: AsyncSession, identity: Identity | None, fanwork_id: int) -> bool:
    """Toggle the caller's bookmark. Requires an authenticated, non-banned caller."""
    actor = check_access(identity)
    return await toggle_interaction(db, actor, fanwork_id, InteractionKind.BOOKMARK)


async def has_interaction(db: AsyncSession, user_id: int, fanwork_id: int, kind: str) -> bool:
    """Whether the user currently likes/bookmarks the fanwork."""
    return await _interaction_exists(db, _model_for(kind), user_id, fanwork_id)
