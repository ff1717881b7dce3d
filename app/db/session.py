"""Async engine and session factory for the local SQLite store."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings

settings = get_settings()

# timeout: seconds sqlite waits on a locked file (scripts may write concurrently)
engine = create_async_engine(
    settings.async_database_url,
    connect_args={"timeout": settings.database_timeout},
    echo=settings.debug,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields a session for ad-hoc queries (health checks)."""
    async with async_session_maker() as session:
        yield session
