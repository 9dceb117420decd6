"""SQLAlchemy ORM models.

These are the single source of truth for the database schema. Alembic reads
``Base.metadata`` to autogenerate migration scripts.

Uses SQLAlchemy 2.0 declarative style with ``Mapped`` type annotations.
Column types stay portable (generic ``JSON`` with a JSONB variant) so the
same models run on PostgreSQL in production and SQLite in tests.
"""

from __future__ import annotations

import secrets
import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, validates

from taskhub.server.models.api import UserResponse
from taskhub.server.security import hash_password, verify_password

# Timezone-aware timestamp type for all datetime columns.
TimestampTZ = DateTime(timezone=True)

JSONType = JSON().with_variant(JSONB(), "postgresql")


def _new_id() -> str:
    return str(uuid.uuid4())


def _invite_code() -> str:
    return secrets.token_hex(4)


def utc_now() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative base with naming convention for constraints."""

    pass


# Apply naming convention to the metadata for deterministic constraint names.
Base.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class User(Base):
    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(primary_key=True, default=_new_id)
    email: Mapped[str | None] = mapped_column(unique=True)
    name: Mapped[str]
    profile_picture: Mapped[str | None] = mapped_column(Text)
    password: Mapped[str | None] = mapped_column(Text)
    """Password hash.  Every assigned value is hashed (see ``_hash_password``)."""

    current_workspace_id: Mapped[str | None] = mapped_column(
        ForeignKey("workspaces.workspace_id", name="fk_users_current_workspace_id", use_alter=True),
    )
    created_at: Mapped[datetime] = mapped_column(TimestampTZ, default=utc_now, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        TimestampTZ, default=utc_now, server_default=func.now(), onupdate=utc_now
    )

    @validates("password")
    def _hash_password(self, _key: str, value: str | None) -> str | None:
        if value is None:
            return value
        return hash_password(value)

    def compare_password(self, password: str) -> bool:
        return verify_password(password, self.password)

    def omit_password(self) -> UserResponse:
        """Public view of this user; the password hash is never included."""
        return UserResponse.model_validate(self)


class Account(Base):
    """Identity account: one (provider, provider_id) pair bound to a user."""

    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("provider", "provider_id", name="uq_accounts_provider_provider_id"),
        Index("ix_accounts_user_id", "user_id"),
    )

    account_id: Mapped[str] = mapped_column(primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.user_id", name="fk_accounts_user_id"))
    provider: Mapped[str]
    provider_id: Mapped[str]
    created_at: Mapped[datetime] = mapped_column(TimestampTZ, default=utc_now, server_default=func.now())


class Workspace(Base):
    __tablename__ = "workspaces"

    workspace_id: Mapped[str] = mapped_column(primary_key=True, default=_new_id)
    name: Mapped[str]
    description: Mapped[str | None] = mapped_column(Text)
    owner_id: Mapped[str] = mapped_column(ForeignKey("users.user_id", name="fk_workspaces_owner_id"))
    invite_code: Mapped[str] = mapped_column(unique=True, default=_invite_code)
    created_at: Mapped[datetime] = mapped_column(TimestampTZ, default=utc_now, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        TimestampTZ, default=utc_now, server_default=func.now(), onupdate=utc_now
    )


class Role(Base):
    __tablename__ = "roles"

    role_id: Mapped[str] = mapped_column(primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(unique=True)
    permissions: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(TimestampTZ, default=utc_now, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        TimestampTZ, default=utc_now, server_default=func.now(), onupdate=utc_now
    )


class Member(Base):
    """Membership: ties a user to a workspace with a role."""

    __tablename__ = "members"
    __table_args__ = (
        UniqueConstraint("user_id", "workspace_id", name="uq_members_user_id_workspace_id"),
        Index("ix_members_workspace_id", "workspace_id"),
    )

    member_id: Mapped[str] = mapped_column(primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.user_id", name="fk_members_user_id"))
    workspace_id: Mapped[str] = mapped_column(ForeignKey("workspaces.workspace_id", name="fk_members_workspace_id"))
    role_id: Mapped[str] = mapped_column(ForeignKey("roles.role_id", name="fk_members_role_id"))
    joined_at: Mapped[datetime] = mapped_column(TimestampTZ, default=utc_now)

    role: Mapped[Role] = relationship(lazy="raise")
