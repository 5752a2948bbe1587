"""
SQLModel-based Fanwork models with inheritance for security

This module defines the Fanworks database model using SQLModel. The inheritance structure is:

FanworkBase (shared public fields)
    ├─> Fanworks (database table, adds ownership and moderation fields)
    └─> FanworkCreate/FanworkUpdate/FanworkResponse (API schemas, defined in fanhub/schemas)
"""

from datetime import UTC, datetime

from sqlalchemy import Column, ForeignKey, Index, Integer, Text
from sqlmodel import Field, SQLModel

from fanhub.config import ContentRating, FanworkType


class FanworkBase(SQLModel):
    """
    Base model with shared public fields for Fanworks.

    These fields are safe to expose via the API and are shared between:
    - The database table (Fanworks)
    - API response schemas (FanworkResponse)
    """

    title: str = Field(max_length=255)
    description: str | None = Field(default=None)
    type: str = Field(default=FanworkType.ARTWORK, max_length=50)
    rating: str = Field(default=ContentRating.ALL_AGES, max_length=20)

    # Payload: text for fanfiction, stored-file references for artwork/comics
    content: str | None = Field(default=None)
    image_url: str | None = Field(default=None, max_length=500)
    file_url: str | None = Field(default=None, max_length=500)

    # Fanfiction metadata
    word_count: int | None = Field(default=None)
    chapter_count: int | None = Field(default=None)
    is_complete: bool = Field(default=False)

    # AO3 import metadata
    ao3_work_id: str | None = Field(default=None, max_length=50)
    ao3_url: str | None = Field(default=None, max_length=500)
    original_author: str | None = Field(default=None, max_length=255)
    imported_at: datetime | None = Field(default=None)


class Fanworks(FanworkBase, table=True):
    """
    Database table for fanworks.

    Extends FanworkBase with:
    - Primary key and author foreign key
    - Moderation sub-state (hidden flag and who/why/when)
    - Timestamps

    Report counters are not stored here; they are derived from the reports
    table on read (see fanhub.services.moderation.get_report_summary).
    """

    __tablename__ = "fanworks"

    __table_args__ = (
        Index("fk_fanworks_author_id", "author_id"),
        Index("idx_fanworks_created_at", "created_at"),
        Index("idx_fanworks_type_rating", "type", "rating"),
        Index("idx_fanworks_is_hidden", "is_hidden"),
    )

    # Primary key
    fanwork_id: int | None = Field(default=None, primary_key=True)

    # Long text columns (TEXT instead of VARCHAR)
    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    content: str | None = Field(default=None, sa_column=Column(Text, nullable=True))

    author_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("users.user_id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        )
    )

    # Moderation
    is_hidden: bool = Field(default=False)
    moderation_reason: str | None = Field(default=None, max_length=500)
    moderated_at: datetime | None = Field(default=None)
    moderated_by: int | None = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("users.user_id", ondelete="SET NULL", onupdate="CASCADE"),
            nullable=True,
        ),
    )

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
