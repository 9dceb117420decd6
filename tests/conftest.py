"""Shared test fixtures.

Most tests run against an in-memory SQLite database (aiosqlite) with the
schema created from ``Base.metadata``; each test gets a fresh engine, so no
state leaks between tests.

PostgreSQL integration tests use a testcontainers-managed PostgreSQL 17
container with Alembic migrations applied.  They are marked
``@pytest.mark.integration``, need Docker, and are deselected by default
(run them with ``pytest -m integration``).
"""

from __future__ import annotations

import os
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from testcontainers.postgres import PostgresContainer

from taskhub.server.db.engine import create_session_factory
from taskhub.server.db.tables import Base, Role
from taskhub.server.managers.roles import seed_roles
from taskhub.server.settings import get_settings


def _set_env(key: str, value: str) -> None:
    """Set an env var and invalidate the settings cache."""
    os.environ[key] = value
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Function-scoped: in-memory SQLite
# ---------------------------------------------------------------------------


@pytest.fixture
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite async engine with all tables."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(async_engine)


@pytest.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Async SQLAlchemy session with the same settings the app uses."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def system_roles(db_session: AsyncSession) -> dict[str, Role]:
    """Seed OWNER/ADMIN/MEMBER; provisioning fails without them."""
    roles = await seed_roles(db_session)
    return {role.name: role for role in roles}


# ---------------------------------------------------------------------------
# Session-scoped: PostgreSQL container (integration only)
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def pg_container() -> Iterator[PostgresContainer]:
    """Start a PostgreSQL 17 container for the test session."""
    with PostgresContainer(
        image="postgres:17",
        username="test",
        password="test",
        dbname="taskhub_test",
        driver="psycopg",
    ) as pg:
        yield pg


@pytest.fixture(scope="session")
def pg_url(pg_container: PostgresContainer) -> str:
    """PostgreSQL URL (psycopg3 dialect) with Alembic migrations applied."""
    url = pg_container.get_connection_url()
    _set_env("TASKHUB_DATABASE_URL", url)

    from alembic import command
    from alembic.config import Config

    ini_path = Path(__file__).parent.parent / "taskhub" / "server" / "alembic.ini"
    command.upgrade(Config(str(ini_path)), "head")

    return url


@pytest.fixture
async def pg_session_factory(pg_url: str) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Session factory on the migrated PostgreSQL database; all rows deleted after the test."""
    from sqlalchemy import text

    engine = create_async_engine(pg_url)
    yield create_session_factory(engine)
    async with engine.begin() as conn:
        await conn.execute(text("UPDATE users SET current_workspace_id = NULL"))
        for table in ("members", "roles", "accounts", "workspaces", "users"):
            await conn.execute(text(f"DELETE FROM {table}"))  # noqa: S608
    await engine.dispose()
