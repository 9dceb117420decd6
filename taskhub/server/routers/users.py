"""User read endpoints (RPC-style)."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from taskhub.server.db.tables import User
from taskhub.server.deps import DbSession
from taskhub.server.managers.workspaces import get_user
from taskhub.server.models.api import UserResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}/get", response_model=UserResponse)
async def handle_get_user(user_id: str, db: DbSession) -> User:
    """Get a single user by ID (password never included)."""
    try:
        return await get_user(db, user_id)
    except LookupError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"User '{user_id}' not found.") from None
