"""
SQLModel-based Report models with inheritance for security

ReportBase (shared public fields)
    ├─> Reports (database table, adds review tracking)
    └─> ReportCreate/ReportResponse (API schemas, defined in fanhub/schemas)

A report targets exactly one of: a fanwork, a comment, or a user.
Status starts at "pending" and moves exactly once to a terminal status.
"""

from datetime import UTC, datetime

from sqlalchemy import Column, ForeignKey, Index, Integer, Text
from sqlmodel import Field, SQLModel

from fanhub.config import ReportStatus


class ReportBase(SQLModel):
    """Base model with shared public fields for Reports."""

    # Target (exactly one is set)
    fanwork_id: int | None = Field(default=None)
    comment_id: int | None = Field(default=None)
    reported_user_id: int | None = Field(default=None)

    # Report details
    reason: str = Field(max_length=50)
    description: str | None = Field(default=None)

    status: str = Field(default=ReportStatus.PENDING, max_length=20)


class Reports(ReportBase, table=True):
    """
    Database table for reports.

    Review fields (reviewed_by, reviewed_at, moderation_action) are written
    once, by the conditional update that moves the report out of "pending".
    """

    __tablename__ = "reports"

    __table_args__ = (
        Index("fk_reports_reporter_id", "reporter_id"),
        Index("fk_reports_fanwork_id", "fanwork_id"),
        Index("fk_reports_comment_id", "comment_id"),
        Index("fk_reports_reported_user_id", "reported_user_id"),
        Index("idx_reports_status", "status"),
    )

    report_id: int | None = Field(default=None, primary_key=True)

    reporter_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("users.user_id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        )
    )

    # Targets cascade with the reported entity
    fanwork_id: int | None = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("fanworks.fanwork_id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=True,
        ),
    )
    comment_id: int | None = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("comments.comment_id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=True,
        ),
    )
    reported_user_id: int | None = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("users.user_id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=True,
        ),
    )

    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Review tracking
    reviewed_by: int | None = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("users.user_id", ondelete="SET NULL", onupdate="CASCADE"),
            nullable=True,
        ),
    )
    reviewed_at: datetime | None = Field(default=None)
    moderation_action: str | None = Field(default=None, max_length=255)
