"""Pytest fixtures for integration tests.

This conftest.py provides integration-specific fixtures:
- In-memory SQLite engine (aiosqlite) with the schema created from metadata
- Session factory wired into the real ingestion unit of work
- A short-lived session for assertions

The root tests/conftest.py handles Python path setup and basic environment.
"""
import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pricewatch.db.base import Base
import pricewatch.db.models  # noqa: F401  (registers tables on Base.metadata)


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def count_rows(session_factory):
    """Count rows of a model using a fresh session."""
    async def count(model):
        async with session_factory() as session:
            return await session.scalar(select(func.count()).select_from(model))
    return count
