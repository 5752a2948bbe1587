"""
Application Configuration
Uses Pydantic Settings for environment-based configuration
"""

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra env vars like MARIADB_* used by docker-compose
    )

    # Application
    PROJECT_NAME: str = "Fanhub API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")
    DEBUG: bool = Field(default=False)
    API_V1_STR: str = "/api/v1"

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 7 * 24 * 60  # 7 days
    BCRYPT_ROUNDS: int = 12

    # CORS
    # Allow str because it can be a comma-separated string in .env
    CORS_ORIGINS: str | list[str] = Field(
        default=["http://localhost:5173", "http://localhost:8000"]
    )

    # Database
    DATABASE_URL: str
    # Sync URL for Alembic migrations
    DATABASE_URL_SYNC: str | None = None
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO: bool = False

    # File Storage
    UPLOAD_PATH: str = "/fanhub/uploads"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    UPLOAD_BASE_URL: str = "/api/v1/media"

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", pattern="^(json|console)$")

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @property
    def is_sqlite(self) -> bool:
        """True when the configured database is SQLite (local development and tests)."""
        return self.DATABASE_URL.startswith("sqlite")


# Create global settings instance

load_dotenv()
settings = Settings()  # type: ignore[call-arg]


class UserRole:
    """User role constants, ordered by privilege"""

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"

    VALUES = frozenset({USER, MODERATOR, ADMIN})
    RANK = {USER: 1, MODERATOR: 2, ADMIN: 3}


class FanworkType:
    """Fanwork type constants"""

    ARTWORK = "artwork"
    FANFICTION = "fanfiction"
    COMIC = "comic"

    VALUES = frozenset({ARTWORK, FANFICTION, COMIC})


class ContentRating:
    """Content rating constants"""

    ALL_AGES = "all-ages"
    TEEN = "teen"
    MATURE = "mature"
    EXPLICIT = "explicit"

    VALUES = frozenset({ALL_AGES, TEEN, MATURE, EXPLICIT})
    # Ratings that require age verification to view or publish
    AGE_GATED = frozenset({MATURE, EXPLICIT})


class ReportStatus:
    """Report status constants"""

    PENDING = "pending"
    REVIEWED = "reviewed"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"

    VALUES = frozenset({PENDING, REVIEWED, RESOLVED, DISMISSED})
    TERMINAL = frozenset({REVIEWED, RESOLVED, DISMISSED})


class ReportReason:
    """Report reason constants"""

    SPAM = "spam"
    HARASSMENT = "harassment"
    INAPPROPRIATE = "inappropriate"
    COPYRIGHT = "copyright"
    UNDERAGE = "underage"
    OTHER = "other"

    VALUES = frozenset({SPAM, HARASSMENT, INAPPROPRIATE, COPYRIGHT, UNDERAGE, OTHER})


class InteractionKind:
    """Toggleable user/fanwork relations"""

    LIKE = "like"
    BOOKMARK = "bookmark"

    VALUES = frozenset({LIKE, BOOKMARK})


class ModerationActionType:
    """Moderation action type constants for audit logging"""

    REPORT_REVIEW = "report_review"
    FANWORK_HIDE = "fanwork_hide"
    FANWORK_UNHIDE = "fanwork_unhide"
    FANWORK_DELETE = "fanwork_delete"
    COMMENT_DELETE = "comment_delete"
    USER_BAN = "user_ban"
    USER_UNBAN = "user_unban"
    USER_ROLE = "user_role"
    USER_AGE_VERIFY = "user_age_verify"
