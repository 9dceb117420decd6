"""Workspace read endpoints (RPC-style).

Workspaces are created by account provisioning, not directly by users.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from taskhub.server.db.tables import Member, Workspace
from taskhub.server.deps import DbSession
from taskhub.server.managers import workspaces as workspace_manager
from taskhub.server.models.api import MemberResponse, WorkspaceResponse

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


@router.get("/list", response_model=list[WorkspaceResponse])
async def list_workspaces(
    db: DbSession,
    user_id: str = Query(..., description="Only workspaces this user is a member of."),
) -> list[Workspace]:
    """List a user's workspaces, newest first."""
    return await workspace_manager.list_user_workspaces(db, user_id)


@router.get("/{workspace_id}/get", response_model=WorkspaceResponse)
async def get_workspace(workspace_id: str, db: DbSession) -> Workspace:
    """Get a single workspace by ID."""
    try:
        return await workspace_manager.get_workspace(db, workspace_id)
    except LookupError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Workspace '{workspace_id}' not found.") from None


@router.get("/{workspace_id}/members/list", response_model=list[MemberResponse])
async def list_members(workspace_id: str, db: DbSession) -> list[Member]:
    """List a workspace's members with their roles."""
    try:
        return await workspace_manager.list_workspace_members(db, workspace_id)
    except LookupError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Workspace '{workspace_id}' not found.") from None
