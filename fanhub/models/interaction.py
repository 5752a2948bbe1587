"""
SQLModel-based Like and Bookmark models

Both tables are pure relations between a user and a fanwork. The existence
of a row IS the boolean state; there is no separate flag. The composite
primary key (user_id, fanwork_id) guarantees at most one row per pair, so a
racing duplicate insert fails at the database instead of creating a second row.
"""

from datetime import UTC, datetime

from sqlalchemy import Column, ForeignKey, Index, Integer
from sqlmodel import Field, SQLModel


class InteractionBase(SQLModel):
    """Shared columns for user/fanwork relation tables."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Likes(InteractionBase, table=True):
    """A user liking a fanwork."""

    __tablename__ = "likes"

    __table_args__ = (Index("fk_likes_fanwork_id", "fanwork_id"),)

    user_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("users.user_id", ondelete="CASCADE", onupdate="CASCADE"),
            primary_key=True,
        )
    )
    fanwork_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("fanworks.fanwork_id", ondelete="CASCADE", onupdate="CASCADE"),
            primary_key=True,
        )
    )


class Bookmarks(InteractionBase, table=True):
    """A user bookmarking a fanwork."""

    __tablename__ = "bookmarks"

    __table_args__ = (Index("fk_bookmarks_fanwork_id", "fanwork_id"),)

    user_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("users.user_id", ondelete="CASCADE", onupdate="CASCADE"),
            primary_key=True,
        )
    )
    fanwork_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("fanworks.fanwork_id", ondelete="CASCADE", onupdate="CASCADE"),
            primary_key=True,
        )
    )
