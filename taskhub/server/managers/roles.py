"""System role lookup and seeding.

Provisioning only ever *reads* roles.  The OWNER/ADMIN/MEMBER rows are a
deployment precondition created by ``seed_roles`` (``taskhub roles seed`` or
``TASKHUB_SEED_ROLES=true``), never on the request path.
"""

from __future__ import annotations

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.server.db.tables import Role
from taskhub.server.managers.errors import RoleNotFoundError
from taskhub.server.models.enums import ROLE_PERMISSIONS, Roles


async def get_role_by_name(db: AsyncSession, name: str) -> Role | None:
    result = await db.execute(select(Role).where(Role.name == name))
    return result.scalar_one_or_none()


async def get_owner_role(db: AsyncSession) -> Role:
    """Return the Owner role.  Raises ``RoleNotFoundError`` if it was never seeded."""
    role = await get_role_by_name(db, Roles.OWNER)
    if role is None:
        logger.error("Owner role not found")
        raise RoleNotFoundError("Owner role not found")
    return role


async def check_system_roles(db: AsyncSession) -> list[str]:
    """Return the names of system roles missing from the database, logging each one."""
    result = await db.execute(select(Role.name).where(Role.name.in_([r.value for r in Roles])))
    present = set(result.scalars().all())
    missing = [role.value for role in Roles if role.value not in present]
    for name in missing:
        logger.error("System role {} is not seeded -- provisioning will fail until `taskhub roles seed` runs", name)
    return missing


async def seed_roles(db: AsyncSession) -> list[Role]:
    """Create or refresh every system role with its permission bundle, then commit."""
    roles: list[Role] = []
    for role_name, permissions in ROLE_PERMISSIONS.items():
        role = await get_role_by_name(db, role_name)
        permission_names = [p.value for p in permissions]
        if role is None:
            role = Role(name=role_name.value, permissions=permission_names)
            db.add(role)
            logger.info("Role {} created ({} permissions)", role_name, len(permission_names))
        elif role.permissions != permission_names:
            role.permissions = permission_names
            logger.info("Role {} permissions updated", role_name)
        roles.append(role)
    await db.commit()
    return roles
