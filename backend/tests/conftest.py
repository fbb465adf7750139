"""Root conftest - shared test configuration and database fixtures.

Invariants:
    - Every DB test gets a fresh in-memory SQLite database
    - DATABASE_URL defaults to SQLite before any topic_enrollment import reads settings

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the unique constraint on topics
      is enforced by SQLite, which is what the provisioning race tests need
"""

import os

# Never point tests at a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)

from topic_enrollment.db.base import Base  # noqa: E402
import topic_enrollment.models  # noqa: E402,F401


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session
