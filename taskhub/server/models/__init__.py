"""Data models for the API server."""

from taskhub.server.models.api import (
    LoginRequest,
    MemberResponse,
    OAuthIdentity,
    RegisterRequest,
    RegisterResponse,
    RoleResponse,
    UserResponse,
    WorkspaceResponse,
)
from taskhub.server.models.enums import ROLE_PERMISSIONS, Permission, Provider, Roles

__all__ = [
    "ROLE_PERMISSIONS",
    # API schemas
    "LoginRequest",
    "MemberResponse",
    "OAuthIdentity",
    # Enums
    "Permission",
    "Provider",
    "RegisterRequest",
    "RegisterResponse",
    "RoleResponse",
    "Roles",
    "UserResponse",
    "WorkspaceResponse",
]
