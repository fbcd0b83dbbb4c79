"""Shared fixtures.

Every test gets its own SQLite file so foreign keys, unique slugs and
cascades behave like the production database.
"""

import asyncio
import os
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_JSON", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from storeadmin.infrastructure.config import settings
from storeadmin.infrastructure.database import build_engine, create_tables, get_session
from storeadmin.main import app


def sqlite_url(tmp_path: Path) -> str:
    """Database URL for a file inside the test's temporary directory."""
    return f"sqlite+aiosqlite:///{tmp_path / 'storeadmin.db'}"


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """Create an engine with all tables."""
    engine = build_engine(sqlite_url(tmp_path), poolclass=NullPool)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(db_engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Create a session for service tests."""
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


# ============================================================================
# Client Fixtures
# ============================================================================


@pytest.fixture
def upload_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point uploads at a temporary directory."""
    directory = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(directory))
    return directory


@pytest.fixture
def client(tmp_path: Path, upload_dir: Path) -> Iterator[TestClient]:
    """Create test client backed by a temporary SQLite database."""
    engine = build_engine(sqlite_url(tmp_path), poolclass=NullPool)
    asyncio.run(create_tables(engine))
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session() -> AsyncIterator[AsyncSession]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
        asyncio.run(engine.dispose())
