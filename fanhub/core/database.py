"""
Database configuration and session management
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from fanhub.config import settings


def configure_sqlite(async_engine: AsyncEngine) -> None:
    """
    Make SQLite behave like the production database.

    Enables foreign key enforcement (ON DELETE CASCADE / SET NULL) and takes
    over transaction control from the driver so SAVEPOINTs nest correctly.
    """

    @event.listens_for(async_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(async_engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


engine_options: dict[str, Any] = {"echo": settings.DB_ECHO}
if not settings.is_sqlite:
    # Pool tuning only applies to server databases
    engine_options.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,  # Verify connections before using
        pool_recycle=3600,  # Recycle connections every hour (MariaDB wait_timeout is 8 hours)
    )

# Create async engine
engine = create_async_engine(settings.DATABASE_URL, **engine_options)
if settings.is_sqlite:
    configure_sqlite(engine)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting async database sessions.

    The session commits when the request handler returns and rolls back
    when it raises, so a failed request leaves no partial writes behind.

    Usage in FastAPI:
        @router.get("/fanworks")
        async def list_fanworks(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
