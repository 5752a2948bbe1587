"""
Fanwork service: publishing, browsing, editing and deleting fanworks.

Visibility follows fanhub.core.access.can_view_fanwork. Listings apply the
same rules as a SQL clause (see `visibility_clause`) so pagination totals
only count what the caller can actually see.
"""

import re
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import and_, delete, false, func, or_, select, true
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from fanhub.config import ContentRating, FanworkType, ModerationActionType
from fanhub.core.access import Identity, can_view_fanwork, check_access, is_age_gated
from fanhub.core.errors import ForbiddenError, NotFoundError, ValidationError
from fanhub.core.logging import get_logger
from fanhub.models.comment import Comments
from fanhub.models.fanwork import Fanworks
from fanhub.models.interaction import Bookmarks, Likes
from fanhub.models.report import Reports
from fanhub.models.tag import FanworkTags, Tags
from fanhub.schemas.fanwork import AO3ImportRequest, FanworkCreate, FanworkFilters, FanworkUpdate
from fanhub.services.audit import record_moderation_action
from fanhub.services.storage import LocalAssetStore, get_asset_store, is_image_type
from fanhub.services.tags import add_tags_to_fanwork, normalize_tag_name, replace_fanwork_tags

logger = get_logger(__name__)

AO3_WORK_RE = re.compile(r"/works/(\d+)")


def _validate_type(value: str) -> None:
    if value not in FanworkType.VALUES:
        raise ValidationError(f"Invalid fanwork type: {value}")


def _validate_rating(value: str) -> None:
    if value not in ContentRating.VALUES:
        raise ValidationError(f"Invalid rating: {value}")


def _word_count(text: str | None) -> int | None:
    if not text:
        return None
    return len(text.split())


def visibility_clause(identity: Identity | None) -> ColumnElement[bool]:
    """SQL equivalent of can_view_fanwork for list queries."""
    conditions: list[ColumnElement[bool]] = []
    if identity is None or not identity.is_moderator:
        conditions.append(Fanworks.is_hidden == false())  # type: ignore[arg-type]
    if identity is None or not (identity.age_verified or identity.is_moderator):
        conditions.append(Fanworks.rating.not_in(ContentRating.AGE_GATED))  # type: ignore[attr-defined]

    clause = and_(true(), *conditions)
    if identity is not None:
        clause = or_(Fanworks.author_id == identity.user_id, clause)  # type: ignore[arg-type]
    return clause


async def _load_fanwork(db: AsyncSession, fanwork_id: int) -> Fanworks:
    result = await db.execute(select(Fanworks).where(Fanworks.fanwork_id == fanwork_id))  # type: ignore[arg-type]
    fanwork = result.scalar_one_or_none()
    if fanwork is None:
        raise NotFoundError("Fanwork not found")
    return fanwork


async def get_fanwork(db: AsyncSession, fanwork_id: int, identity: Identity | None) -> Fanworks:
    """
    Load one fanwork for display.

    Raises:
        NotFoundError: Fanwork missing, or hidden from the caller
        UnauthorizedError / ForbiddenError: Age-gated and the caller is
            anonymous or not age verified (moderators are exempt)
    """
    fanwork = await _load_fanwork(db, fanwork_id)
    is_author = identity is not None and fanwork.author_id == identity.user_id

    if fanwork.is_hidden and not is_author and (identity is None or not identity.is_moderator):
        raise NotFoundError("Fanwork not found")

    if is_age_gated(fanwork.rating) and not is_author:
        if identity is None or not identity.is_moderator:
            check_access(identity, age_gate=True, allow_banned=True)

    return fanwork


async def create_fanwork(db: AsyncSession, identity: Identity | None, data: FanworkCreate) -> Fanworks:
    """
    Publish a new fanwork owned by the caller.

    Mature and explicit ratings can only be published by age-verified users.
    """
    _validate_type(data.type)
    _validate_rating(data.rating)
    actor = check_access(identity, age_gate=is_age_gated(data.rating))

    word_count = data.word_count
    if word_count is None and data.type == FanworkType.FANFICTION:
        word_count = _word_count(data.content)

    fanwork = Fanworks(
        **data.model_dump(exclude={"tags", "word_count"}),
        word_count=word_count,
        author_id=actor.user_id,
    )
    db.add(fanwork)
    await db.flush()

    if data.tags:
        await add_tags_to_fanwork(db, fanwork.fanwork_id, data.tags)  # type: ignore[arg-type]

    await db.commit()
    await db.refresh(fanwork)

    logger.info(
        "fanwork_created",
        fanwork_id=fanwork.fanwork_id,
        author_id=actor.user_id,
        type=fanwork.type,
        rating=fanwork.rating,
    )
    return fanwork


async def import_ao3_work(
    db: AsyncSession, identity: Identity | None, data: AO3ImportRequest
) -> Fanworks:
    """
    Create a fanfiction entry pointing at a work on Archive of Our Own.

    Only the work id is taken from the URL; the content is a stub linking
    back to the original.

    Raises:
        ValidationError: URL does not contain /works/<id>
    """
    actor = check_access(identity)

    match = AO3_WORK_RE.search(data.ao3_url)
    if match is None:
        raise ValidationError("Invalid AO3 URL format")
    ao3_work_id = match.group(1)

    fanwork = Fanworks(
        title=(data.title or "").strip() or f"Imported from AO3 Work {ao3_work_id}",
        description=data.description or "Imported from Archive of Our Own",
        type=FanworkType.FANFICTION,
        rating=ContentRating.TEEN,
        author_id=actor.user_id,
        ao3_work_id=ao3_work_id,
        ao3_url=data.ao3_url,
        imported_at=datetime.now(UTC),
        content=(
            f"This work was imported from Archive of Our Own: {data.ao3_url}\n\n"
            "Please visit the original link for the full content."
        ),
    )
    db.add(fanwork)
    await db.commit()
    await db.refresh(fanwork)

    logger.info(
        "fanwork_imported",
        fanwork_id=fanwork.fanwork_id,
        author_id=actor.user_id,
        ao3_work_id=ao3_work_id,
    )
    return fanwork


async def list_fanworks(
    db: AsyncSession, identity: Identity | None, filters: FanworkFilters
) -> tuple[list[Fanworks], int]:
    """
    Browse fanworks, newest first.

    Values inside one filter dimension are alternatives; dimensions combine
    with AND. Hidden and age-gated items the caller may not see are excluded
    before counting.

    Returns:
        (page of fanworks, total matching)
    """
    for value in filters.types:
        _validate_type(value)
    for value in filters.ratings:
        _validate_rating(value)

    conditions: list[Any] = [visibility_clause(identity)]
    if filters.types:
        conditions.append(Fanworks.type.in_(filters.types))  # type: ignore[attr-defined]
    if filters.ratings:
        conditions.append(Fanworks.rating.in_(filters.ratings))  # type: ignore[attr-defined]
    if filters.tags:
        tag_names = {normalize_tag_name(name) for name in filters.tags}
        tagged = (
            select(FanworkTags.fanwork_id)  # type: ignore[call-overload]
            .join(Tags, FanworkTags.tag_id == Tags.tag_id)
            .where(Tags.name.in_(tag_names))  # type: ignore[attr-defined]
        )
        conditions.append(Fanworks.fanwork_id.in_(tagged))  # type: ignore[union-attr]
    if filters.search and filters.search.strip():
        term = filters.search.strip()
        conditions.append(
            or_(
                Fanworks.title.icontains(term, autoescape=True),  # type: ignore[attr-defined]
                Fanworks.description.icontains(term, autoescape=True),  # type: ignore[union-attr]
            )
        )
    if filters.author_id is not None:
        conditions.append(Fanworks.author_id == filters.author_id)

    total_result = await db.execute(select(func.count()).select_from(Fanworks).where(*conditions))
    total = total_result.scalar_one()

    result = await db.execute(
        select(Fanworks)
        .where(*conditions)
        .order_by(Fanworks.created_at.desc(), Fanworks.fanwork_id.desc())  # type: ignore[attr-defined,union-attr]
        .limit(filters.limit)
        .offset(filters.offset)
    )
    return list(result.scalars().all()), total


async def _load_owned_fanwork(db: AsyncSession, actor: Identity, fanwork_id: int) -> Fanworks:
    fanwork = await _load_fanwork(db, fanwork_id)
    if fanwork.author_id != actor.user_id:
        if not can_view_fanwork(fanwork, actor):
            raise NotFoundError("Fanwork not found")
        raise ForbiddenError("You can only modify your own fanworks")
    return fanwork


async def update_fanwork(
    db: AsyncSession, identity: Identity | None, fanwork_id: int, changes: FanworkUpdate
) -> Fanworks:
    """
    Edit a fanwork. Author only. A given tag list replaces the current tags.

    Raises:
        NotFoundError: Fanwork missing or hidden from the caller
        ForbiddenError: Caller is not the author, or raises the rating to an
            age-gated one without being age verified
    """
    actor = check_access(identity)
    fanwork = await _load_owned_fanwork(db, actor, fanwork_id)

    update_data = changes.model_dump(exclude_unset=True, exclude={"tags"})
    if update_data.get("type") is not None:
        _validate_type(update_data["type"])
    if update_data.get("rating") is not None:
        _validate_rating(update_data["rating"])
        if is_age_gated(update_data["rating"]):
            check_access(actor, age_gate=True)

    for field, value in update_data.items():
        if field in ("title", "type", "rating", "is_complete") and value is None:
            continue
        setattr(fanwork, field, value)
    fanwork.updated_at = datetime.now(UTC)

    if changes.tags is not None:
        await replace_fanwork_tags(db, fanwork_id, changes.tags)

    await db.commit()
    await db.refresh(fanwork)

    logger.info("fanwork_updated", fanwork_id=fanwork_id, fields=sorted(update_data))
    return fanwork


async def purge_fanwork(db: AsyncSession, fanwork: Fanworks) -> None:
    """
    Hard-delete a fanwork and everything that belongs to it.

    Removes tag links, likes, bookmarks, comments, and reports on the
    fanwork or its comments. Does not commit.
    """
    fanwork_id = fanwork.fanwork_id
    if fanwork in db:
        db.expunge(fanwork)

    comment_ids = select(Comments.comment_id).where(Comments.fanwork_id == fanwork_id)  # type: ignore[call-overload]

    statements = [
        delete(Reports).where(
            or_(
                Reports.fanwork_id == fanwork_id,  # type: ignore[arg-type]
                Reports.comment_id.in_(comment_ids),  # type: ignore[union-attr]
            )
        ),
        delete(Comments).where(Comments.fanwork_id == fanwork_id),  # type: ignore[arg-type]
        delete(Likes).where(Likes.fanwork_id == fanwork_id),  # type: ignore[arg-type]
        delete(Bookmarks).where(Bookmarks.fanwork_id == fanwork_id),  # type: ignore[arg-type]
        delete(FanworkTags).where(FanworkTags.fanwork_id == fanwork_id),  # type: ignore[arg-type]
        delete(Fanworks).where(Fanworks.fanwork_id == fanwork_id),  # type: ignore[arg-type]
    ]
    for statement in statements:
        await db.execute(statement.execution_options(synchronize_session=False))


async def delete_fanwork(db: AsyncSession, identity: Identity | None, fanwork_id: int) -> None:
    """
    Delete a fanwork. Authors may delete their own; moderators may delete any.

    Deletions by someone other than the author are audit-logged.
    """
    actor = check_access(identity)
    fanwork = await _load_fanwork(db, fanwork_id)

    is_author = fanwork.author_id == actor.user_id
    if not is_author and not actor.is_moderator:
        if not can_view_fanwork(fanwork, actor):
            raise NotFoundError("Fanwork not found")
        raise ForbiddenError("You can only delete your own fanworks")

    details = {"fanwork_id": fanwork_id, "title": fanwork.title, "author_id": fanwork.author_id}
    await purge_fanwork(db, fanwork)
    if not is_author:
        record_moderation_action(
            db,
            actor.user_id,
            ModerationActionType.FANWORK_DELETE,
            target_user_id=fanwork.author_id,
            details=details,
        )
    await db.commit()

    logger.info("fanwork_deleted", fanwork_id=fanwork_id, by_author=is_author)


async def attach_fanwork_file(
    db: AsyncSession,
    identity: Identity | None,
    fanwork_id: int,
    data: bytes,
    content_type: str,
    store: LocalAssetStore | None = None,
) -> tuple[Fanworks, str]:
    """
    Store an uploaded file and attach it to a fanwork. Author only.

    Images become the fanwork's `image_url`; documents its `file_url`.

    Returns:
        (updated fanwork, public URL of the stored file)
    """
    actor = check_access(identity)
    fanwork = await _load_owned_fanwork(db, actor, fanwork_id)

    store = store or get_asset_store()
    locator = store.store(data, content_type)
    url = store.url_for(locator)

    if is_image_type(content_type.split(";", 1)[0].strip().lower()):
        fanwork.image_url = url
    else:
        fanwork.file_url = url
    fanwork.updated_at = datetime.now(UTC)

    await db.commit()
    await db.refresh(fanwork)

    logger.info("fanwork_file_attached", fanwork_id=fanwork_id, locator=locator)
    return fanwork, url


async def _list_related_fanworks(
    db: AsyncSession,
    identity: Identity | None,
    model: type[Likes] | type[Bookmarks],
    limit: int,
    offset: int,
) -> tuple[list[Fanworks], int]:
    actor = check_access(identity, allow_banned=True)
    conditions = [model.user_id == actor.user_id, visibility_clause(actor)]

    total_result = await db.execute(
        select(func.count())
        .select_from(Fanworks)
        .join(model, model.fanwork_id == Fanworks.fanwork_id)  # type: ignore[arg-type]
        .where(*conditions)
    )
    result = await db.execute(
        select(Fanworks)
        .join(model, model.fanwork_id == Fanworks.fanwork_id)  # type: ignore[arg-type]
        .where(*conditions)
        .order_by(model.created_at.desc(), Fanworks.fanwork_id.desc())  # type: ignore[attr-defined,union-attr]
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all()), total_result.scalar_one()


async def list_liked_fanworks(
    db: AsyncSession, identity: Identity | None, limit: int = 20, offset: int = 0
) -> tuple[list[Fanworks], int]:
    """Fanworks the caller likes, most recently liked first."""
    return await _list_related_fanworks(db, identity, Likes, limit, offset)


async def list_bookmarked_fanworks(
    db: AsyncSession, identity: Identity | None, limit: int = 20, offset: int = 0
) -> tuple[list[Fanworks], int]:
    """Fanworks the caller bookmarked, most recently bookmarked first."""
    return await _list_related_fanworks(db, identity, Bookmarks, limit, offset)
