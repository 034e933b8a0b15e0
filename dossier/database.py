"""Database setup and session management."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from .config import get_settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def get_sync_url() -> str:
    """Storage URL for synchronous tooling (Alembic)."""
    db_url = get_settings().database_url()
    return db_url.replace("postgresql+psycopg://", "postgresql://").replace(
        "postgresql+asyncpg://", "postgresql://"
    )


def get_async_url() -> str:
    """Storage URL rewritten to the async driver."""
    db_url = get_settings().database_url()
    if db_url.startswith("postgresql://"):
        return db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return db_url.replace("postgresql+psycopg://", "postgresql+asyncpg://")


@lru_cache
def get_async_engine() -> AsyncEngine:
    """Process-wide async engine; the pool is shared by all requests."""
    return create_async_engine(
        get_async_url(),
        echo=get_settings().db_echo,
        pool_pre_ping=True,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get async session factory for application."""
    return async_sessionmaker(
        bind=get_async_engine(),
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


# Dependency for FastAPI
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency to get database session.

    Usage:
        @router.get("/api/people")
        async def list_people(db: AsyncSession = Depends(get_db)):
            ...
    """
    async_session = get_async_session_factory()
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Close pooled connections on shutdown if the engine was ever created."""
    if get_async_engine.cache_info().currsize:
        await get_async_engine().dispose()
