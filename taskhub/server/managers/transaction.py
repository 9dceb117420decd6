"""Scoped transaction for multi-entity writes.

All writes issued on the session inside ``transaction()`` belong to one
database transaction: it commits only when the block exits normally and is
rolled back on any exception (cancellation included) before the exception
propagates.  Nothing is retried.

Unique-constraint violations on the user email or on the identity pair are
how a concurrent first-time provisioning for the same identity shows up.
They are re-raised as ``EmailAlreadyExistsError`` / ``IdentityConflictError``
so the loser of that race gets a client error instead of a server fault.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.server.managers.errors import BadRequestError, EmailAlreadyExistsError, IdentityConflictError

# Constraint markers as reported by PostgreSQL (constraint name) and SQLite (table.column).
_CONFLICTS: tuple[tuple[tuple[str, ...], type[BadRequestError], str], ...] = (
    (("uq_users_email", "users.email"), EmailAlreadyExistsError, "Email already exists"),
    (
        ("uq_accounts_provider_provider_id", "accounts.provider"),
        IdentityConflictError,
        "Account already linked to a user",
    ),
)


def _conflict_from(exc: IntegrityError) -> BadRequestError | None:
    message = str(exc.orig)
    for markers, error_cls, detail in _CONFLICTS:
        if any(marker in message for marker in markers):
            return error_cls(detail)
    return None


@asynccontextmanager
async def transaction(db: AsyncSession, operation: str) -> AsyncIterator[AsyncSession]:
    """Run the enclosed block as one atomic unit on *db*.

    Usage::

        async with transaction(db, "register_user"):
            db.add(user)
            await db.flush()
            ...
    """
    logger.info("Started transaction for {}", operation)
    try:
        yield db
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Transaction for {} rolled back on constraint violation", operation)
        conflict = _conflict_from(exc)
        if conflict is None:
            raise
        raise conflict from exc
    except BaseException:
        await db.rollback()
        logger.warning("Transaction for {} rolled back", operation)
        raise
    logger.info("Transaction committed for {}", operation)
