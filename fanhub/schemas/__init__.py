"""Pydantic schemas for API request/response validation"""

from fanhub.schemas.admin import (
    AgeVerificationUpdate,
    BanUserRequest,
    HideFanworkRequest,
    RoleUpdateRequest,
)
from fanhub.schemas.auth import (
    AgeConfirmationRequest,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
)
from fanhub.schemas.comment import CommentCreate, CommentListResponse, CommentResponse
from fanhub.schemas.common import MessageResponse, UserSummary
from fanhub.schemas.fanwork import (
    AO3ImportRequest,
    BookmarkResponse,
    FanworkCounts,
    FanworkCreate,
    FanworkDetailResponse,
    FanworkFilters,
    FanworkListResponse,
    FanworkModerationResponse,
    FanworkResponse,
    FanworkUpdate,
    LikeResponse,
    UploadResponse,
)
from fanhub.schemas.report import (
    ReportCreate,
    ReportListResponse,
    ReportResponse,
    ReportReview,
    ReportSummary,
)
from fanhub.schemas.tag import TagListResponse, TagResponse
from fanhub.schemas.user import (
    UserModerationResponse,
    UserPrivateResponse,
    UserResponse,
    UserUpdate,
)

__all__ = [
    # Auth
    "RegisterRequest",
    "LoginRequest",
    "TokenResponse",
    "AgeConfirmationRequest",
    # Users
    "UserResponse",
    "UserPrivateResponse",
    "UserModerationResponse",
    "UserUpdate",
    "UserSummary",
    # Fanworks
    "FanworkCreate",
    "FanworkUpdate",
    "FanworkFilters",
    "FanworkCounts",
    "FanworkResponse",
    "FanworkDetailResponse",
    "FanworkModerationResponse",
    "FanworkListResponse",
    "AO3ImportRequest",
    "LikeResponse",
    "BookmarkResponse",
    "UploadResponse",
    # Tags
    "TagResponse",
    "TagListResponse",
    # Comments
    "CommentCreate",
    "CommentResponse",
    "CommentListResponse",
    # Reports and moderation
    "ReportCreate",
    "ReportReview",
    "ReportResponse",
    "ReportListResponse",
    "ReportSummary",
    "HideFanworkRequest",
    "BanUserRequest",
    "RoleUpdateRequest",
    "AgeVerificationUpdate",
    "MessageResponse",
]
