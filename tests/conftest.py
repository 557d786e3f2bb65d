"""Root conftest — shared DB fixtures for store, repository and route tests.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - db_manager is a DatabaseSessionManager bound to the test engine

Design Decisions:
    - SQLite in-memory with StaticPool: one connection, so every session sees
      the tables created by create_all (ADR: no PostgreSQL-specific features used)
    - DatabaseSessionManager built via __new__: skips pool_size arguments
      SQLite's StaticPool does not accept
"""

import os

# Ensure importing the app never points at a real database
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

import host_inventory.models  # noqa: E402,F401
from host_inventory.db.base import Base  # noqa: E402
from host_inventory.infrastructure.database import DatabaseSessionManager  # noqa: E402
from host_inventory.infrastructure.document_store import DocumentStore  # noqa: E402


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
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
def db_manager(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
def document_store(db_manager):
    return DocumentStore(db_manager, timeout_seconds=5.0)


@pytest.fixture
def hosts_collection(document_store):
    return document_store.collection("hosts")
