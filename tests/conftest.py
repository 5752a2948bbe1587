"""
Pytest configuration and shared fixtures.

Tests run against a throwaway SQLite database per test function. Settings are
read at import time, so the environment is prepared before anything from
fanhub is imported.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("BCRYPT_ROUNDS", "4")  # Fast hashing in tests

import itertools  # noqa: E402
from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import fanhub.models  # noqa: E402,F401  (registers every table with SQLModel.metadata)
from fanhub.config import ContentRating, FanworkType, UserRole  # noqa: E402
from fanhub.core.access import Identity  # noqa: E402
from fanhub.core.database import configure_sqlite, get_db  # noqa: E402
from fanhub.core.security import create_access_token, get_password_hash  # noqa: E402
from fanhub.main import app as main_app  # noqa: E402
from fanhub.models.fanwork import Fanworks  # noqa: E402
from fanhub.models.user import Users  # noqa: E402
from fanhub.services.storage import LocalAssetStore, get_asset_store  # noqa: E402

TEST_PASSWORD = "secret1"


@pytest.fixture(scope="function")
async def engine(tmp_path):
    """
    Create a fresh database for each test function.

    Defaults to a SQLite file under tmp_path; set TEST_DATABASE_URL to run
    against another async database.

    Scope is "function" so the async engine shares the event loop of the
    function-scoped db_session fixture.
    """
    url = os.environ.get("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'fanhub_test.db'}"
    test_engine = create_async_engine(url, echo=False)
    if url.startswith("sqlite"):
        configure_sqlite(test_engine)

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a new database session for each test.

    The same session is handed to the app, so objects created here are visible
    to request handlers and vice versa.
    """
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def asset_store(tmp_path) -> LocalAssetStore:
    """Asset store writing under the test's temporary directory."""
    return LocalAssetStore(tmp_path / "uploads", max_size=1024 * 1024)


@pytest.fixture(scope="function")
def app(db_session: AsyncSession, asset_store: LocalAssetStore) -> FastAPI:
    """
    FastAPI app wired to the test session and asset store.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    main_app.dependency_overrides[get_db] = override_get_db
    main_app.dependency_overrides[get_asset_store] = lambda: asset_store

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for API tests.

    Usage:
        async def test_endpoint(client):
            response = await client.get("/api/v1/fanworks")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[Users]]:
    """
    Factory for committed users.

    Usage:
        async def test_something(make_user):
            mod = await make_user("mod", role=UserRole.MODERATOR)
    """
    counter = itertools.count(1)

    async def _make_user(
        username: str | None = None,
        *,
        role: str = UserRole.USER,
        age_verified: bool = False,
        is_banned: bool = False,
        email: str | None = None,
        password: str = TEST_PASSWORD,
    ) -> Users:
        username = username or f"user{next(counter)}"
        user = Users(
            username=username,
            email=email or f"{username}@fanhub.io",
            password_hash=get_password_hash(password),
            role=role,
            age_verified=age_verified,
            is_banned=is_banned,
            ban_reason="Spamming" if is_banned else None,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_fanwork(db_session: AsyncSession) -> Callable[..., Awaitable[Fanworks]]:
    """Factory for committed fanworks owned by `author`."""

    async def _make_fanwork(author: Users, **overrides: Any) -> Fanworks:
        values: dict[str, Any] = {
            "title": "Test Fanwork",
            "type": FanworkType.ARTWORK,
            "rating": ContentRating.ALL_AGES,
        }
        values.update(overrides)
        fanwork = Fanworks(author_id=author.user_id, **values)
        db_session.add(fanwork)
        await db_session.commit()
        await db_session.refresh(fanwork)
        return fanwork

    return _make_fanwork


@pytest.fixture
def auth_headers() -> Callable[[Users], dict[str, str]]:
    """Bearer Authorization header for a user."""

    def _auth_headers(user: Users) -> dict[str, str]:
        assert user.user_id is not None
        return {"Authorization": f"Bearer {create_access_token(user.user_id)}"}

    return _auth_headers


@pytest.fixture
def identity_of() -> Callable[[Users], Identity]:
    """Resolve a user into the Identity services expect."""
    return Identity.from_user
