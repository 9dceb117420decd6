"""Migrations run on a sync driver against TASKHUB_DATABASE_URL."""

from __future__ import annotations

from logging.config import fileConfig
from typing import Any

from alembic import context
from sqlalchemy import create_engine, pool

from taskhub.server.db.tables import Base
from taskhub.server.settings import TaskhubSettings

# Async driver -> sync driver used by Alembic.
_SYNC_DRIVERS = {
    "postgresql+asyncpg://": "postgresql+psycopg://",
    "sqlite+aiosqlite://": "sqlite://",
}

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def sync_url(url: str) -> str:
    for async_prefix, sync_prefix in _SYNC_DRIVERS.items():
        if url.startswith(async_prefix):
            return sync_prefix + url[len(async_prefix) :]
    return url


def _database_url() -> str:
    url = TaskhubSettings().database_url
    if not url:
        raise RuntimeError("TASKHUB_DATABASE_URL is not set. Cannot run migrations.")
    return sync_url(url)


def _own_tables_only(obj: Any, name: str | None, type_: str, reflected: bool, compare_to: Any) -> bool:
    # Tables in the database with no model are left alone by autogenerate.
    return not (type_ == "table" and reflected and compare_to is None)


_COMPARE = {"target_metadata": target_metadata, "include_object": _own_tables_only, "compare_type": True}

if context.is_offline_mode():
    context.configure(url=_database_url(), literal_binds=True, dialect_opts={"paramstyle": "named"}, **_COMPARE)
    with context.begin_transaction():
        context.run_migrations()
else:
    engine = create_engine(_database_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        # SQLite cannot ALTER constraints in place.
        context.configure(connection=connection, render_as_batch=connection.dialect.name == "sqlite", **_COMPARE)
        with context.begin_transaction():
            context.run_migrations()
