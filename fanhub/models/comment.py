"""
SQLModel-based Comment models with inheritance for security

CommentBase (shared public fields)
    ├─> Comments (database table)
    └─> CommentResponse (API schema, defined in fanhub/schemas)
"""

from datetime import UTC, datetime

from sqlalchemy import Column, ForeignKey, Index, Integer, Text
from sqlmodel import Field, SQLModel


class CommentBase(SQLModel):
    """Base model with shared public fields for Comments."""

    content: str = Field(default="")
    fanwork_id: int | None = Field(default=None)


class Comments(CommentBase, table=True):
    """
    Database table for comments.

    Comments are hard-deleted by their author or by a moderator, and removed
    together with their fanwork.
    """

    __tablename__ = "comments"

    __table_args__ = (
        Index("fk_comments_fanwork_id", "fanwork_id"),
        Index("fk_comments_user_id", "user_id"),
    )

    comment_id: int | None = Field(default=None, primary_key=True)

    content: str = Field(default="", sa_column=Column(Text, nullable=False))

    user_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("users.user_id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        )
    )
    fanwork_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("fanworks.fanwork_id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        )
    )

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
