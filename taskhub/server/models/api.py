"""API request / response schemas.

These thin schemas sit between HTTP and the ORM layer:

- **Request** schemas validate user input and provide defaults.
- **Response** schemas serialize ORM rows via ``from_attributes``.  None of
  them carry the password hash.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from taskhub.server.models.enums import Provider

# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Explicit email/password registration."""

    email: str = Field(min_length=3, max_length=255)
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class RegisterResponse(BaseModel):
    user_id: str
    workspace_id: str


class LoginRequest(BaseModel):
    email: str
    password: str


class OAuthIdentity(BaseModel):
    """Identity asserted by an external provider after a successful OAuth callback."""

    provider: Provider
    provider_id: str = Field(min_length=1)
    display_name: str
    email: str | None = None
    picture: str | None = None


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Serialized user returned to clients (password omitted)."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    email: str | None = None
    name: str
    profile_picture: str | None = None
    current_workspace_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Workspaces
# ---------------------------------------------------------------------------


class WorkspaceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    workspace_id: str
    name: str
    description: str | None = None
    owner_id: str
    invite_code: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    role_id: str
    name: str
    permissions: list[str] = Field(default_factory=list)


class MemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    member_id: str
    user_id: str
    workspace_id: str
    role: RoleResponse
    joined_at: datetime
