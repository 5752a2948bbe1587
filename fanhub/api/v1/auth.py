"""
Authentication endpoints for user registration, login and age confirmation.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from fanhub.config import settings
from fanhub.core.auth import CurrentIdentity
from fanhub.core.database import get_db
from fanhub.core.security import create_access_token
from fanhub.models.user import Users
from fanhub.schemas.auth import (
    AgeConfirmationRequest,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
)
from fanhub.schemas.common import MessageResponse
from fanhub.schemas.user import UserPrivateResponse
from fanhub.services.users import authenticate_user, confirm_age, get_user, register_user

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_auth_cookie(response: Response, access_token: str) -> None:
    """Set the access token as an HTTPOnly cookie for browser clients."""
    response.set_cookie(
        key="access_token",
        value=access_token,
        httponly=True,  # Prevent JavaScript access (XSS protection)
        secure=settings.ENVIRONMENT == "production",  # HTTPS only in production
        samesite="strict",  # CSRF protection
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,  # Match JWT expiration
    )


def _token_response(response: Response, user: Users) -> TokenResponse:
    assert user.user_id is not None
    access_token = create_access_token(user.user_id)
    _set_auth_cookie(response, access_token)
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserPrivateResponse.model_validate(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """
    Create an account and log it in.

    Returns an access token in the body and sets it as an HTTPOnly cookie.
    Duplicate email or username returns 400.
    """
    user = await register_user(
        db,
        email=data.email,
        username=data.username,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
    )
    return _token_response(response, user)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate by email and password.

    Banned users can still log in and read; their write actions are refused.
    """
    user = await authenticate_user(db, credentials.email, credentials.password)
    return _token_response(response, user)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    """Clear the access token cookie."""
    # Match set_cookie params
    response.delete_cookie(
        key="access_token",
        path="/",
        httponly=True,
        secure=settings.ENVIRONMENT == "production",
        samesite="strict",
    )
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserPrivateResponse)
async def get_me(
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserPrivateResponse:
    """Get the authenticated user's own account, including ban state."""
    user = await get_user(db, identity.user_id)
    return UserPrivateResponse.model_validate(user)


@router.post("/verify-age", response_model=UserPrivateResponse)
async def verify_age(
    data: AgeConfirmationRequest,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserPrivateResponse:
    """Confirm the caller is 18 or older, unlocking mature and explicit content."""
    user = await confirm_age(db, identity, data.confirmed)
    return UserPrivateResponse.model_validate(user)
