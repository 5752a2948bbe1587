"""
SQLModel-based User models with inheritance for security

This module defines the Users database model using SQLModel, which combines
SQLAlchemy and Pydantic functionality. The inheritance structure is:

UserBase (shared public fields)
    ├─> Users (database table, adds internal/sensitive fields)
    └─> UserResponse/UserPrivateResponse (API schemas, defined in fanhub/schemas)

This approach eliminates field duplication while maintaining security boundaries.
"""

from datetime import UTC, datetime

from sqlalchemy import ForeignKeyConstraint, Index
from sqlmodel import Field, SQLModel

from fanhub.config import UserRole


class UserBase(SQLModel):
    """
    Base model with shared public fields for Users.

    These fields are safe to expose via the API.
    """

    username: str = Field(max_length=50)

    # Public profile
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    profile_image_url: str | None = Field(default=None, max_length=500)

    # Public role badge
    role: str = Field(default=UserRole.USER, max_length=20)


class Users(UserBase, table=True):
    """
    Database table for users with internal and sensitive fields.

    Internal/sensitive fields (should NOT be exposed via public API):
    - password_hash: Authentication (highly sensitive)
    - email: Privacy-sensitive
    - is_active, ban fields, age verification: access control state

    Users are never physically deleted; bans and deactivation are soft states.
    """

    __tablename__ = "users"

    __table_args__ = (
        ForeignKeyConstraint(
            ["banned_by"],
            ["users.user_id"],
            ondelete="SET NULL",
            onupdate="CASCADE",
            name="fk_users_banned_by",
        ),
        Index("uq_users_email", "email", unique=True),
        Index("uq_users_username", "username", unique=True),
        Index("idx_users_role", "role"),
    )

    # Primary key
    user_id: int | None = Field(default=None, primary_key=True)

    # Authentication (highly sensitive - never expose)
    password_hash: str = Field(max_length=255)

    # Contact info (privacy-sensitive)
    email: str = Field(max_length=255)

    # Account state
    is_active: bool = Field(default=True)

    # Ban state
    is_banned: bool = Field(default=False)
    ban_reason: str | None = Field(default=None, max_length=500)
    banned_at: datetime | None = Field(default=None)
    banned_by: int | None = Field(default=None)

    # Age gate
    age_verified: bool = Field(default=False)
    age_verified_at: datetime | None = Field(default=None)

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Note: Relationships are intentionally omitted.
    # Foreign keys are sufficient for queries, and omitting relationships avoids
    # accidental lazy loading on async sessions.
