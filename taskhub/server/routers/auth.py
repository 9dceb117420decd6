"""Authentication endpoints (RPC-style).

Thin HTTP adapter -- delegates to the auth manager and maps domain errors
to status codes.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from taskhub.server.db.tables import User
from taskhub.server.deps import DbSession, GatewayAuth
from taskhub.server.managers.auth import login_or_create_account, register_user, verify_user
from taskhub.server.managers.errors import BadRequestError, NotFoundError, UnauthorizedError
from taskhub.server.models.api import LoginRequest, OAuthIdentity, RegisterRequest, RegisterResponse, UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def handle_register(body: RegisterRequest, db: DbSession) -> RegisterResponse:
    """Register an email/password user and provision their default workspace."""
    try:
        return await register_user(db, body)
    except BadRequestError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from None
    except NotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from None


@router.post("/login", response_model=UserResponse)
async def handle_login(body: LoginRequest, db: DbSession) -> UserResponse:
    """Verify email/password credentials."""
    try:
        return await verify_user(db, body.email, body.password)
    except NotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    except UnauthorizedError as exc:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from None


@router.post("/oauth/login", response_model=UserResponse, dependencies=[GatewayAuth])
async def handle_oauth_login(body: OAuthIdentity, db: DbSession) -> User:
    """Log in (or sign up) an identity asserted by the OAuth gateway."""
    try:
        return await login_or_create_account(db, body)
    except BadRequestError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from None
    except NotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
