from pathlib import Path

import click


@click.group()
def main() -> None:
    """Taskhub - multi-tenant task and project management backend."""


@main.command()
@click.option("--host", default=None, help="Bind host (default: from TASKHUB_HOST or 0.0.0.0).")
@click.option("--port", default=None, type=int, help="Bind port (default: from TASKHUB_PORT or 8000).")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development.")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the API server."""
    import uvicorn

    from taskhub.server.settings import TaskhubSettings

    settings = TaskhubSettings()

    uvicorn.run(
        "taskhub.server.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level="warning",  # uvicorn's own logging is intercepted by loguru
    )


# ---------------------------------------------------------------------------
# Database management
# ---------------------------------------------------------------------------

# alembic.ini ships inside the package next to the alembic/ scripts.
ALEMBIC_INI = Path(__file__).parent / "server" / "alembic.ini"


def _alembic(action: str, *args: str, **kwargs: object) -> None:
    from alembic import command
    from alembic.config import Config

    getattr(command, action)(Config(str(ALEMBIC_INI)), *args, **kwargs)


@main.group()
def db() -> None:
    """Schema migrations (Alembic)."""


@db.command()
@click.option("--revision", default="head", show_default=True)
def upgrade(revision: str) -> None:
    """Apply migrations up to REVISION."""
    _alembic("upgrade", revision)
    click.echo(f"Database upgraded to {revision}.")


@db.command()
@click.option("--revision", default="-1", show_default=True)
def downgrade(revision: str) -> None:
    """Revert migrations down to REVISION."""
    _alembic("downgrade", revision)
    click.echo(f"Database downgraded to {revision}.")


@db.command()
@click.argument("message")
def migrate(message: str) -> None:
    """Autogenerate a revision from the ORM tables."""
    _alembic("revision", message=message, autogenerate=True)
    click.echo(f"Migration generated: {message}")


@db.command()
def current() -> None:
    _alembic("current", verbose=True)


@db.command()
def history() -> None:
    _alembic("history", verbose=True)


# ---------------------------------------------------------------------------
# System roles
# ---------------------------------------------------------------------------


@main.group()
def roles() -> None:
    """System role management."""


@roles.command()
def seed() -> None:
    """Create or refresh the OWNER, ADMIN and MEMBER roles."""
    import asyncio

    from taskhub.server.db.engine import create_engine, create_session_factory
    from taskhub.server.log import setup_logging
    from taskhub.server.managers.roles import seed_roles
    from taskhub.server.settings import TaskhubSettings

    settings = TaskhubSettings()
    setup_logging(settings.log_level)
    if not settings.database_url:
        raise click.ClickException("TASKHUB_DATABASE_URL is not set.")

    async def _run() -> list[str]:
        engine = create_engine(settings.database_url)
        try:
            async with create_session_factory(engine)() as session:
                return [role.name for role in await seed_roles(session)]
        finally:
            await engine.dispose()

    names = asyncio.run(_run())
    click.echo(f"Seeded roles: {', '.join(names)}.")


if __name__ == "__main__":
    main()
