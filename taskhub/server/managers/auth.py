"""Identity flows: OAuth login-or-create, registration, credential verification.

Login-or-create and registration each provision a full user graph (user,
identity account, default workspace, Owner membership) inside a single
``transaction()``; either every entity is committed or none is.
Verification is read-only and runs without a transaction.

Errors are logged with context and re-raised unchanged.
"""

from __future__ import annotations

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.server.db.tables import Account, User
from taskhub.server.managers.errors import EmailAlreadyExistsError, NotFoundError, UnauthorizedError
from taskhub.server.managers.provisioning import create_user, link_account, provision_default_workspace
from taskhub.server.managers.transaction import transaction
from taskhub.server.models.api import OAuthIdentity, RegisterRequest, RegisterResponse, UserResponse
from taskhub.server.models.enums import Provider

INVALID_CREDENTIALS = "Invalid email or password"


async def find_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def find_account(db: AsyncSession, provider: str, provider_id: str) -> Account | None:
    result = await db.execute(
        select(Account).where(Account.provider == provider, Account.provider_id == provider_id),
    )
    return result.scalar_one_or_none()


async def _find_existing_user(db: AsyncSession, identity: OAuthIdentity) -> User | None:
    """Resolve a returning user.

    Matches on email, so a user first seen under another provider is reused.
    Identities without an email fall back to their own (provider, provider_id)
    account; an email-less lookup never matches unrelated users.
    """
    if identity.email is not None:
        return await find_user_by_email(db, identity.email)
    account = await find_account(db, identity.provider, identity.provider_id)
    if account is None:
        return None
    return await db.get(User, account.user_id)


async def login_or_create_account(db: AsyncSession, identity: OAuthIdentity) -> User:
    """Return the user for *identity*, provisioning it on first login.

    A returning user is a pure lookup: nothing is written.
    """
    provider, email = identity.provider, identity.email
    try:
        async with transaction(db, "login_or_create_account"):
            logger.info("Login or create (provider={}, email={})", provider, email)
            user = await _find_existing_user(db, identity)
            if user is None:
                logger.info("No user found, creating new user (email={}, name={})", email, identity.display_name)
                user = await create_user(db, email=email, name=identity.display_name, picture=identity.picture)
                await link_account(db, user, provider, identity.provider_id)
                await provision_default_workspace(db, user)
            else:
                logger.info("User found, skipping creation (email={}, user_id={})", email, user.user_id)
    except Exception as exc:
        logger.error("Error in login_or_create_account (provider={}, email={}): {!r}", provider, email, exc)
        raise
    return user


async def register_user(db: AsyncSession, body: RegisterRequest) -> RegisterResponse:
    """Create a password user with its default workspace.

    Raises ``EmailAlreadyExistsError`` if the email is taken, including when a
    concurrent registration wins the race.
    """
    email = body.email
    try:
        async with transaction(db, "register_user"):
            logger.info("Registering user (email={}, name={})", email, body.name)
            if await find_user_by_email(db, email) is not None:
                logger.warning("Registration attempt with existing email (email={})", email)
                raise EmailAlreadyExistsError("Email already exists")

            user = await create_user(db, email=email, name=body.name, password=body.password)
            await link_account(db, user, Provider.EMAIL, email)
            workspace = await provision_default_workspace(db, user)
    except Exception as exc:
        logger.error("Error in register_user (email={}): {!r}", email, exc)
        raise

    return RegisterResponse(user_id=user.user_id, workspace_id=workspace.workspace_id)


async def verify_user(
    db: AsyncSession,
    email: str,
    password: str,
    provider: str = Provider.EMAIL,
) -> UserResponse:
    """Check email/password credentials and return the user without its password.

    Unknown accounts and wrong passwords report the same message so callers
    cannot tell which half was wrong.
    """
    try:
        logger.info("Verifying user (email={}, provider={})", email, provider)

        account = await find_account(db, provider, email)
        if account is None:
            logger.warning("Account not found during verification (email={}, provider={})", email, provider)
            raise NotFoundError(INVALID_CREDENTIALS)

        user = await db.get(User, account.user_id)
        if user is None:
            logger.warning("User not found for account (email={}, user_id={})", email, account.user_id)
            raise NotFoundError("User not found for the given account")

        if not user.compare_password(password):
            logger.warning("Invalid password attempt (user_id={}, email={})", user.user_id, email)
            raise UnauthorizedError(INVALID_CREDENTIALS)
    except Exception as exc:
        logger.error("Error in verify_user (email={}): {!r}", email, exc)
        raise

    logger.info("User verified successfully (user_id={}, email={})", user.user_id, email)
    return user.omit_password()
