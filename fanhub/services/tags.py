"""
Tag service.

Tags are created lazily the first time a name is used and never deleted.
Names are stored trimmed and lower-cased, so "Hurt/Comfort" and
" hurt/comfort " are the same tag.
"""

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.core.errors import ValidationError
from fanhub.core.logging import get_logger
from fanhub.models.tag import FanworkTags, Tags

logger = get_logger(__name__)

MAX_TAG_LENGTH = 100


def normalize_tag_name(name: str) -> str:
    """
    Canonical form of a tag name: trimmed, inner whitespace collapsed, lower-cased.

    Raises:
        ValidationError: Name is empty or longer than MAX_TAG_LENGTH
    """
    normalized = " ".join(name.split()).lower()
    if not normalized:
        raise ValidationError("Tag name cannot be empty")
    if len(normalized) > MAX_TAG_LENGTH:
        raise ValidationError(f"Tag name cannot exceed {MAX_TAG_LENGTH} characters")
    return normalized


async def _find_tag(db: AsyncSession, name: str) -> Tags | None:
    result = await db.execute(select(Tags).where(Tags.name == name))  # type: ignore[arg-type]
    return result.scalar_one_or_none()


async def get_or_create_tag(db: AsyncSession, name: str) -> Tags:
    """
    Return the tag with this name, creating it when missing.

    Two writers creating the same new tag race on the unique name index;
    the loser's savepoint is rolled back and the winner's row is returned.
    """
    normalized = normalize_tag_name(name)

    tag = await _find_tag(db, normalized)
    if tag is not None:
        return tag

    try:
        async with db.begin_nested():
            tag = Tags(name=normalized)
            db.add(tag)
    except IntegrityError:
        logger.info("tag_create_race", name=normalized)
        tag = await _find_tag(db, normalized)
        if tag is None:
            raise
        return tag

    logger.info("tag_created", tag_id=tag.tag_id, name=normalized)
    return tag


async def add_tags_to_fanwork(db: AsyncSession, fanwork_id: int, names: list[str]) -> list[Tags]:
    """
    Link tags to a fanwork by name.

    Duplicate names (after normalization) are linked once and links that
    already exist are skipped. Does not commit; callers own the transaction.

    Returns:
        The tags now linked from `names`, in first-seen order
    """
    seen: set[str] = set()
    unique_names: list[str] = []
    for raw in names:
        normalized = normalize_tag_name(raw)
        if normalized not in seen:
            seen.add(normalized)
            unique_names.append(normalized)

    if not unique_names:
        return []

    existing_result = await db.execute(
        select(FanworkTags.tag_id).where(FanworkTags.fanwork_id == fanwork_id)  # type: ignore[arg-type,call-overload]
    )
    linked_ids = set(existing_result.scalars().all())

    tags: list[Tags] = []
    for name in unique_names:
        tag = await get_or_create_tag(db, name)
        tags.append(tag)
        if tag.tag_id in linked_ids:
            continue
        db.add(FanworkTags(fanwork_id=fanwork_id, tag_id=tag.tag_id))  # type: ignore[arg-type]
        linked_ids.add(tag.tag_id)  # type: ignore[arg-type]

    await db.flush()
    return tags


async def replace_fanwork_tags(db: AsyncSession, fanwork_id: int, names: list[str]) -> list[Tags]:
    """Replace a fanwork's tag set with `names`. Does not commit."""
    await db.execute(delete(FanworkTags).where(FanworkTags.fanwork_id == fanwork_id))  # type: ignore[arg-type]
    return await add_tags_to_fanwork(db, fanwork_id, names)


async def get_tag_names_for_fanworks(db: AsyncSession, fanwork_ids: list[int]) -> dict[int, list[str]]:
    """
    Fetch tag names for multiple fanworks in a single query.

    Fanworks without tags do not appear in the result; use .get(id, []).
    """
    if not fanwork_ids:
        return {}

    result = await db.execute(
        select(FanworkTags.fanwork_id, Tags.name)  # type: ignore[call-overload]
        .join(Tags, FanworkTags.tag_id == Tags.tag_id)
        .where(FanworkTags.fanwork_id.in_(fanwork_ids))  # type: ignore[attr-defined]
        .order_by(Tags.name)
    )

    names_by_fanwork: dict[int, list[str]] = {}
    for fanwork_id, name in result.fetchall():
        names_by_fanwork.setdefault(fanwork_id, []).append(name)
    return names_by_fanwork


async def list_tags(
    db: AsyncSession, search: str | None = None, limit: int = 100, offset: int = 0
) -> tuple[list[Tags], int]:
    """
    List tags alphabetically, optionally filtered by a name prefix.

    Returns:
        (tags, total) where total ignores limit/offset
    """
    query = select(Tags)
    count_query = select(func.count()).select_from(Tags)
    if search:
        prefix = " ".join(search.split()).lower()
        query = query.where(Tags.name.startswith(prefix, autoescape=True))  # type: ignore[attr-defined]
        count_query = count_query.where(Tags.name.startswith(prefix, autoescape=True))  # type: ignore[attr-defined]

    total = (await db.execute(count_query)).scalar_one()
    result = await db.execute(query.order_by(Tags.name).limit(limit).offset(offset))
    return list(result.scalars().all()), total
