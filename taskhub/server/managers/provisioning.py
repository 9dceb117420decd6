"""Entity creation shared by the login-or-create and registration flows.

A new identity is provisioned by creating the user and its identity account,
then running ``PROVISIONING_STEPS`` in order:

1. create the default workspace owned by the user
2. resolve the Owner role (fails fast if roles are not seeded)
3. add the user to the workspace with the Owner role
4. point ``user.current_workspace_id`` at the new workspace

Every helper flushes so that ids exist for the next step and constraint
violations surface at the step that caused them.  None of them commits:
callers run them inside ``transaction()``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.server.db.tables import Account, Member, Role, User, Workspace, utc_now
from taskhub.server.managers.roles import get_owner_role

DEFAULT_WORKSPACE_NAME = "My Workspace"


@dataclass
class ProvisioningContext:
    """Entities produced so far for one user."""

    user: User
    workspace: Workspace | None = None
    owner_role: Role | None = None

    def require_workspace(self) -> Workspace:
        if self.workspace is None:
            raise RuntimeError("Provisioning step ran before the workspace was created")
        return self.workspace

    def require_owner_role(self) -> Role:
        if self.owner_role is None:
            raise RuntimeError("Provisioning step ran before the Owner role was resolved")
        return self.owner_role


ProvisioningStep = Callable[[AsyncSession, ProvisioningContext], Awaitable[None]]


async def create_user(
    db: AsyncSession,
    *,
    email: str | None,
    name: str,
    picture: str | None = None,
    password: str | None = None,
) -> User:
    user = User(email=email, name=name, profile_picture=picture, password=password)
    db.add(user)
    await db.flush()
    logger.info("User created (user_id={}, email={})", user.user_id, email)
    return user


async def link_account(db: AsyncSession, user: User, provider: str, provider_id: str) -> Account:
    account = Account(user_id=user.user_id, provider=provider, provider_id=provider_id)
    db.add(account)
    await db.flush()
    logger.info("Account created (user_id={}, provider={}, provider_id={})", user.user_id, provider, provider_id)
    return account


async def _create_workspace(db: AsyncSession, ctx: ProvisioningContext) -> None:
    workspace = Workspace(
        name=DEFAULT_WORKSPACE_NAME,
        description=f"Workspace created for {ctx.user.name}",
        owner_id=ctx.user.user_id,
    )
    db.add(workspace)
    await db.flush()
    ctx.workspace = workspace
    logger.info("Workspace created (workspace_id={}, owner_id={})", workspace.workspace_id, ctx.user.user_id)


async def _resolve_owner_role(db: AsyncSession, ctx: ProvisioningContext) -> None:
    ctx.owner_role = await get_owner_role(db)


async def _create_owner_membership(db: AsyncSession, ctx: ProvisioningContext) -> None:
    workspace, owner_role = ctx.require_workspace(), ctx.require_owner_role()
    member = Member(
        user_id=ctx.user.user_id,
        workspace_id=workspace.workspace_id,
        role_id=owner_role.role_id,
        joined_at=utc_now(),
    )
    db.add(member)
    await db.flush()
    logger.info(
        "Member created with OWNER role (user_id={}, workspace_id={})", ctx.user.user_id, workspace.workspace_id
    )


async def _set_current_workspace(db: AsyncSession, ctx: ProvisioningContext) -> None:
    workspace = ctx.require_workspace()
    ctx.user.current_workspace_id = workspace.workspace_id
    await db.flush()
    logger.info(
        "Set user's current workspace (user_id={}, workspace_id={})", ctx.user.user_id, workspace.workspace_id
    )


PROVISIONING_STEPS: tuple[ProvisioningStep, ...] = (
    _create_workspace,
    _resolve_owner_role,
    _create_owner_membership,
    _set_current_workspace,
)


async def provision_default_workspace(db: AsyncSession, user: User) -> Workspace:
    """Run every provisioning step for *user* and return its new default workspace."""
    ctx = ProvisioningContext(user=user)
    for step in PROVISIONING_STEPS:
        await step(db, ctx)
    return ctx.require_workspace()
