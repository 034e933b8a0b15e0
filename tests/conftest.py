"""Shared test fixtures and configuration."""

import os
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Set up test environment BEFORE importing app modules that use get_settings
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "warning")

from dossier.config import get_settings  # noqa: E402
from dossier.database import Base, get_db  # noqa: E402
from dossier.main import app  # noqa: E402
from dossier.models.person import Person  # noqa: E402

# Clear the lru_cache on get_settings to pick up test env vars
get_settings.cache_clear()


# Test database URL (in-memory SQLite for speed)
TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DB_URL,
        echo=False,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


def _client_for(session: AsyncSession) -> AsyncClient:
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    )


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database override."""
    async with _client_for(db_session) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def broken_session() -> AsyncMock:
    """A session whose every table call fails like a dropped connection."""
    session = AsyncMock(spec=AsyncSession)
    failure = OperationalError("SELECT 1", {}, Exception("connection refused"))
    session.execute.side_effect = failure
    session.get.side_effect = failure
    session.commit.side_effect = failure
    return session


@pytest_asyncio.fixture
async def broken_client(
    broken_session: AsyncMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Client whose database dependency always fails."""
    async with _client_for(broken_session) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_person(db_session: AsyncSession) -> Person:
    """A stored person written with the legacy column layout."""
    person = Person(
        name="Jane Doe",
        callsign="WREN",
        role="Analyst",
        unit="Alpha",
        traits=["calm", "precise"],
        proficiencies=["maps"],
        stats={"clearance": "Directorate", "threat": "Low", "loyalty": "High"},
        affiliation="Directorate",
    )
    db_session.add(person)
    await db_session.commit()
    await db_session.refresh(person)
    return person
