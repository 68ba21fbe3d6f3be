"""Database session management with async SQLAlchemy."""

from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import settings


def build_engine_kwargs(database_url: str) -> dict[str, Any]:
    """Engine options for the configured backend.

    SQLite shares one connection (StaticPool) so in-memory databases survive
    across sessions; other backends get a sized pool.
    """
    kwargs: dict[str, Any] = {
        "url": database_url,
        "echo": False,
        "pool_pre_ping": True,
    }
    if database_url.lower().startswith("sqlite"):
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_size"] = 10
        kwargs["max_overflow"] = 20
    return kwargs


engine = create_async_engine(**build_engine_kwargs(settings.DATABASE_URL))

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
