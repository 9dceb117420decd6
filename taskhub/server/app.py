import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.routing import APIRouter
from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from taskhub.server.db.engine import create_engine, create_session_factory
from taskhub.server.log import setup_logging
from taskhub.server.managers.roles import check_system_roles, seed_roles
from taskhub.server.settings import get_settings

_STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # -- Startup ---------------------------------------------------------------
    settings = get_settings()
    setup_logging(settings.log_level)

    auth_token = settings.resolve_auth_token()
    if not settings.auth_token:
        logger.warning("No TASKHUB_AUTH_TOKEN set -- generated gateway token: {}", auth_token)
    _app.state.auth_token = auth_token

    logger.info("Taskhub API starting (host={}, port={})", settings.host, settings.port)

    # -- Initialise state fields (always present, possibly None) ----------------
    _app.state.db_engine = None
    _app.state.db_session_factory = None

    # -- Database --------------------------------------------------------------
    if settings.database_url:
        engine = create_engine(settings.database_url)
        _app.state.db_engine = engine
        _app.state.db_session_factory = create_session_factory(engine)
        logger.info("Database: configured ({})", engine.url.get_backend_name())

        # Provisioning needs the system roles; report (or seed) them up front.
        # An unreachable database is reported by /api/health, not a failed boot.
        try:
            async with _app.state.db_session_factory() as db:
                if settings.seed_roles:
                    await seed_roles(db)
                else:
                    await check_system_roles(db)
        except (OSError, SQLAlchemyError) as exc:
            logger.error("System role check skipped, database unavailable: {!r}", exc)
    else:
        logger.warning("TASKHUB_DATABASE_URL not set -- database features disabled")

    yield

    # -- Shutdown --------------------------------------------------------------
    logger.info("Taskhub API shutting down")

    # Dispose DB engine (closes all pooled connections).
    if _app.state.db_engine is not None:
        await _app.state.db_engine.dispose()
        logger.info("Database: disposed")


app = FastAPI(title="Taskhub API", lifespan=lifespan)

# ---------------------------------------------------------------------------
# API router -- all backend endpoints live under /api
# ---------------------------------------------------------------------------
api = APIRouter(prefix="/api")


@api.get("/health")
async def health(request: Request) -> JSONResponse:
    """Liveness plus a database round-trip when one is configured."""
    body: dict[str, object] = {
        "status": "ok",
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        "timestamp": datetime.now(UTC).isoformat(),
        "database": "disabled",
    }
    session_factory = getattr(request.app.state, "db_session_factory", None)
    if session_factory is not None:
        try:
            async with session_factory() as db:
                await db.execute(text("SELECT 1"))
        except Exception as exc:
            logger.error("Database is not reachable: {!r}", exc)
            body.update(status="fail", database="unavailable")
            return JSONResponse(body, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        body["database"] = "connected"
    return JSONResponse(body)


# -- Routers -------------------------------------------------------------------
from taskhub.server.routers.auth import router as auth_router  # noqa: E402
from taskhub.server.routers.users import router as users_router  # noqa: E402
from taskhub.server.routers.workspaces import router as workspaces_router  # noqa: E402

api.include_router(auth_router)
api.include_router(users_router)
api.include_router(workspaces_router)

app.include_router(api)
