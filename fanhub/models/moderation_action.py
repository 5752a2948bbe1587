"""
SQLModel-based ModerationAction model for audit logging

Append-only trail of moderator/admin actions: report reviews, hide/unhide,
deletions, bans, role and age-verification changes. Entity references are
nullable and set to NULL when the entity is deleted; `details` keeps the
original ids and before/after values.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Column, ForeignKey, Index, Integer
from sqlmodel import Field, SQLModel


class ModerationActions(SQLModel, table=True):
    """Audit log for moderation actions."""

    __tablename__ = "moderation_actions"

    __table_args__ = (
        Index("fk_moderation_actions_actor_id", "actor_id"),
        Index("idx_moderation_actions_action_type", "action_type"),
        Index("idx_moderation_actions_created_at", "created_at"),
    )

    action_id: int | None = Field(default=None, primary_key=True)

    # Moderator who performed the action
    actor_id: int | None = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("users.user_id", ondelete="SET NULL", onupdate="CASCADE"),
            nullable=True,
        ),
    )

    # ModerationActionType constant
    action_type: str = Field(max_length=50)

    # Related entities (nullable - not all actions have all references)
    fanwork_id: int | None = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("fanworks.fanwork_id", ondelete="SET NULL", onupdate="CASCADE"),
            nullable=True,
        ),
    )
    comment_id: int | None = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("comments.comment_id", ondelete="SET NULL", onupdate="CASCADE"),
            nullable=True,
        ),
    )
    target_user_id: int | None = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("users.user_id", ondelete="SET NULL", onupdate="CASCADE"),
            nullable=True,
        ),
    )
    report_id: int | None = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("reports.report_id", ondelete="SET NULL", onupdate="CASCADE"),
            nullable=True,
        ),
    )

    # JSON details with action context
    details: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
