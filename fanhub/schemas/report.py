"""
Pydantic schemas for Report endpoints.

Reports flag a fanwork, a comment or a user for moderator review.
"""

from pydantic import BaseModel, Field, field_validator

from fanhub.config import ReportReason, ReportStatus
from fanhub.models.report import ReportBase
from fanhub.schemas.base import UTCDatetime, UTCDatetimeOptional
from fanhub.schemas.common import UserSummary


class ReportCreate(BaseModel):
    """Schema for filing a report; the target comes from the URL."""

    reason: str = Field(..., description="Report reason category")
    description: str | None = Field(default=None, max_length=2000)

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: str) -> str:
        v = v.strip()
        if v not in ReportReason.VALUES:
            raise ValueError(f"reason must be one of: {', '.join(sorted(ReportReason.VALUES))}")
        return v

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class ReportReview(BaseModel):
    """Schema for moving a report to a terminal status"""

    status: str = Field(..., description="reviewed, resolved or dismissed")
    moderation_action: str | None = Field(default=None, max_length=255)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in ReportStatus.TERMINAL:
            raise ValueError(f"status must be one of: {', '.join(sorted(ReportStatus.TERMINAL))}")
        return v


class ReportResponse(ReportBase):
    """Schema for report response"""

    report_id: int
    reporter_id: int
    created_at: UTCDatetime
    reviewed_by: int | None = None
    reviewed_at: UTCDatetimeOptional = None
    moderation_action: str | None = None
    reporter: UserSummary | None = None

    model_config = {"from_attributes": True}


class ReportListResponse(BaseModel):
    """Schema for paginated report list"""

    total: int
    limit: int
    offset: int
    reports: list[ReportResponse]


class ReportSummary(BaseModel):
    """Report counters for one fanwork, derived from the reports table"""

    report_count: int = 0
    is_reported: bool = False
