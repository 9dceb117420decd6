"""Service configuration loaded from TASKHUB_* environment variables."""

from __future__ import annotations

import secrets
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class TaskhubSettings(BaseSettings):
    """Taskhub API server settings.

    All fields are read from environment variables with the ``TASKHUB_`` prefix.
    For example, ``TASKHUB_LOG_LEVEL=DEBUG`` maps to ``log_level``.
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKHUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    # -- Infrastructure --------------------------------------------------------
    database_url: str | None = None
    """Async SQLAlchemy URL (``postgresql+psycopg://...``).  Required for full operation."""

    seed_roles: bool = False
    """Upsert the OWNER/ADMIN/MEMBER roles at startup.

    Off by default: role seeding is a deployment step (``taskhub roles seed``),
    and provisioning refuses to run until the Owner role exists.
    """

    # -- Auth ------------------------------------------------------------------
    auth_token: str | None = None
    """Bearer token the identity gateway presents on OAuth logins.  Auto-generated at startup if empty."""

    # -- Server ----------------------------------------------------------------
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8000

    def resolve_auth_token(self) -> str:
        """Return the configured token or generate a random one."""
        if self.auth_token:
            return self.auth_token
        return secrets.token_urlsafe(32)


@lru_cache(maxsize=1)
def get_settings() -> TaskhubSettings:
    """Settings are read once per process; tests call ``get_settings.cache_clear()``."""
    return TaskhubSettings()
