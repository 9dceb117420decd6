"""Shared enumerations used across the API server."""

from __future__ import annotations

from enum import StrEnum

# -- Identity ----------------------------------------------------------------


class Provider(StrEnum):
    """Authentication provider that owns an identity account."""

    GOOGLE = "GOOGLE"
    GITHUB = "GITHUB"
    FACEBOOK = "FACEBOOK"
    EMAIL = "EMAIL"


# -- Roles -------------------------------------------------------------------


class Roles(StrEnum):
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class Permission(StrEnum):
    CREATE_WORKSPACE = "CREATE_WORKSPACE"
    DELETE_WORKSPACE = "DELETE_WORKSPACE"
    EDIT_WORKSPACE = "EDIT_WORKSPACE"
    MANAGE_WORKSPACE_SETTINGS = "MANAGE_WORKSPACE_SETTINGS"

    ADD_MEMBER = "ADD_MEMBER"
    CHANGE_MEMBER_ROLE = "CHANGE_MEMBER_ROLE"
    REMOVE_MEMBER = "REMOVE_MEMBER"

    CREATE_PROJECT = "CREATE_PROJECT"
    EDIT_PROJECT = "EDIT_PROJECT"
    DELETE_PROJECT = "DELETE_PROJECT"

    CREATE_TASK = "CREATE_TASK"
    EDIT_TASK = "EDIT_TASK"
    DELETE_TASK = "DELETE_TASK"

    VIEW_ONLY = "VIEW_ONLY"


ROLE_PERMISSIONS: dict[Roles, tuple[Permission, ...]] = {
    Roles.OWNER: tuple(Permission),
    Roles.ADMIN: (
        Permission.ADD_MEMBER,
        Permission.CREATE_PROJECT,
        Permission.EDIT_PROJECT,
        Permission.DELETE_PROJECT,
        Permission.CREATE_TASK,
        Permission.EDIT_TASK,
        Permission.DELETE_TASK,
        Permission.MANAGE_WORKSPACE_SETTINGS,
        Permission.VIEW_ONLY,
    ),
    Roles.MEMBER: (
        Permission.VIEW_ONLY,
        Permission.CREATE_TASK,
        Permission.EDIT_TASK,
    ),
}
"""Permission bundle seeded for each system role."""
