"""
SQLModel-based Tag models

Tags are created lazily on first use ("get or create") and never deleted.
FanworkTags is the junction table linking tags to fanworks.
"""

from datetime import UTC, datetime

from sqlalchemy import Column, ForeignKey, Index, Integer
from sqlmodel import Field, SQLModel


class TagBase(SQLModel):
    """Base model with shared public fields for Tags."""

    # Stored lower-cased; see fanhub.services.tags.normalize_tag_name
    name: str = Field(max_length=100)


class Tags(TagBase, table=True):
    """Database table for tags."""

    __tablename__ = "tags"

    __table_args__ = (Index("uq_tags_name", "name", unique=True),)

    tag_id: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class FanworkTags(SQLModel, table=True):
    """
    Junction table connecting tags to fanworks.

    The composite primary key makes linking the same tag twice impossible.
    """

    __tablename__ = "fanwork_tags"

    __table_args__ = (Index("fk_fanwork_tags_tag_id", "tag_id"),)

    fanwork_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("fanworks.fanwork_id", ondelete="CASCADE", onupdate="CASCADE"),
            primary_key=True,
        )
    )
    tag_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("tags.tag_id", ondelete="CASCADE", onupdate="CASCADE"),
            primary_key=True,
        )
    )
