"""Shared fixtures for API server HTTP tests."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskhub.server.app import app
from taskhub.server.deps import get_db

GATEWAY_TOKEN = "test-gateway-token"


@pytest.fixture
async def client(
    db_session: AsyncSession, session_factory: async_sessionmaker[AsyncSession]
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the app with a test DB session.

    Overrides ``get_db`` so every request uses the ``db_session`` fixture
    from the root conftest.  The app lifespan does NOT run under
    ``ASGITransport``, so state fields are pre-set here.
    """

    async def _override_get_db() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db

    app.state.db_engine = None
    app.state.db_session_factory = session_factory
    app.state.auth_token = GATEWAY_TOKEN

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def gateway_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {GATEWAY_TOKEN}"}
