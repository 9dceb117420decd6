"""Tests for the scoped provisioning transaction."""

from __future__ import annotations

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskhub.server.db.tables import Account, Member, Role, User
from taskhub.server.managers.errors import EmailAlreadyExistsError, IdentityConflictError
from taskhub.server.managers.provisioning import (
    PROVISIONING_STEPS,
    ProvisioningContext,
    _create_owner_membership,
    create_user,
    link_account,
    provision_default_workspace,
)
from taskhub.server.managers.transaction import transaction


async def _user_count(db: AsyncSession) -> int:
    return (await db.execute(select(func.count()).select_from(User))).scalar_one()


async def test_commits_on_success(
    db_session: AsyncSession, session_factory: async_sessionmaker[AsyncSession]
) -> None:
    async with transaction(db_session, "test"):
        db_session.add(User(email="a@x.com", name="A"))

    assert not db_session.in_transaction()
    async with session_factory() as other:
        assert await _user_count(other) == 1


async def test_rolls_back_on_error(db_session: AsyncSession) -> None:
    with pytest.raises(RuntimeError, match="boom"):
        async with transaction(db_session, "test"):
            db_session.add(User(email="a@x.com", name="A"))
            await db_session.flush()
            raise RuntimeError("boom")

    assert await _user_count(db_session) == 0


async def test_rolls_back_on_cancellation(db_session: AsyncSession) -> None:
    with pytest.raises(asyncio.CancelledError):
        async with transaction(db_session, "test"):
            db_session.add(User(email="a@x.com", name="A"))
            await db_session.flush()
            raise asyncio.CancelledError

    assert not db_session.in_transaction()
    assert await _user_count(db_session) == 0


async def test_duplicate_email_becomes_bad_request(db_session: AsyncSession) -> None:
    async with transaction(db_session, "first"):
        await create_user(db_session, email="a@x.com", name="A")

    with pytest.raises(EmailAlreadyExistsError):
        async with transaction(db_session, "second"):
            await create_user(db_session, email="a@x.com", name="B")

    assert await _user_count(db_session) == 1


async def test_duplicate_identity_becomes_bad_request(db_session: AsyncSession) -> None:
    async with transaction(db_session, "first"):
        user = await create_user(db_session, email="a@x.com", name="A")
        await link_account(db_session, user, "GOOGLE", "g1")

    with pytest.raises(IdentityConflictError):
        async with transaction(db_session, "second"):
            other = await create_user(db_session, email="b@x.com", name="B")
            await link_account(db_session, other, "GOOGLE", "g1")

    accounts = (await db_session.execute(select(func.count()).select_from(Account))).scalar_one()
    assert accounts == 1
    assert await _user_count(db_session) == 1


async def test_provisioning_steps_run_in_order(db_session: AsyncSession, system_roles: dict[str, Role]) -> None:
    assert [step.__name__ for step in PROVISIONING_STEPS] == [
        "_create_workspace",
        "_resolve_owner_role",
        "_create_owner_membership",
        "_set_current_workspace",
    ]

    async with transaction(db_session, "provision"):
        user = await create_user(db_session, email="a@x.com", name="A")
        workspace = await provision_default_workspace(db_session, user)

    result = await db_session.execute(select(Member).where(Member.workspace_id == workspace.workspace_id))
    member = result.scalar_one()
    assert member.user_id == user.user_id
    assert member.role_id == system_roles["OWNER"].role_id
    assert workspace.owner_id == user.user_id
    assert user.current_workspace_id == workspace.workspace_id


async def test_step_out_of_order_is_rejected(db_session: AsyncSession, system_roles: dict[str, Role]) -> None:
    user = await create_user(db_session, email="a@x.com", name="A")
    ctx = ProvisioningContext(user=user)

    with pytest.raises(RuntimeError, match="before the workspace was created"):
        await _create_owner_membership(db_session, ctx)
