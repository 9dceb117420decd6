"""Workspace and membership read access."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskhub.server.db.tables import Member, User, Workspace
from taskhub.server.managers.errors import NotFoundError


async def get_user(db: AsyncSession, user_id: str) -> User:
    """Get a user by ID.  Raises ``NotFoundError`` if missing."""
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError(user_id)
    return user


async def get_workspace(db: AsyncSession, workspace_id: str) -> Workspace:
    """Get a workspace by ID.  Raises ``NotFoundError`` if missing."""
    workspace = await db.get(Workspace, workspace_id)
    if workspace is None:
        raise NotFoundError(workspace_id)
    return workspace


async def list_user_workspaces(db: AsyncSession, user_id: str) -> list[Workspace]:
    """Workspaces the user is a member of, newest first."""
    stmt = (
        select(Workspace)
        .join(Member, Member.workspace_id == Workspace.workspace_id)
        .where(Member.user_id == user_id)
        .order_by(Workspace.created_at.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_workspace_members(db: AsyncSession, workspace_id: str) -> list[Member]:
    """Members of a workspace with their role loaded.  Raises ``NotFoundError`` if the workspace is missing."""
    await get_workspace(db, workspace_id)
    stmt = (
        select(Member)
        .options(selectinload(Member.role))
        .where(Member.workspace_id == workspace_id)
        .order_by(Member.joined_at)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
