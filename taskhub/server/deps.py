"""FastAPI dependency injection for DB sessions and gateway authentication.

Usage in route handlers::

    @router.post("/things")
    async def create_thing(db: DbSession, thing: ThingCreate) -> ThingResponse:
        ...

``get_db`` raises HTTP 503 if the database was not configured
(TASKHUB_DATABASE_URL unset).
"""

from __future__ import annotations

import secrets
from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

_bearer = HTTPBearer(auto_error=False)


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield an async SQLAlchemy session, closing it after the request.

    Managers own commit/rollback.  If the handler raises, the session is
    simply closed and any open transaction is rolled back.
    """
    session_factory = request.app.state.db_session_factory
    if session_factory is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not configured (TASKHUB_DATABASE_URL is unset).",
        )
    session: AsyncSession = session_factory()
    try:
        yield session
    finally:
        await session.close()


async def require_gateway_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> None:
    """Reject requests that do not carry the identity gateway's bearer token."""
    expected: str | None = getattr(request.app.state, "auth_token", None)
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    if expected is None or not secrets.compare_digest(credentials.credentials, expected):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="Invalid bearer token")


# -- Annotated type aliases for concise route signatures ---------------------

DbSession = Annotated[AsyncSession, Depends(get_db)]
"""Annotated dependency: async SQLAlchemy session (auto-closed after request)."""

GatewayAuth = Depends(require_gateway_token)
"""Route dependency: caller must be the trusted identity gateway."""
