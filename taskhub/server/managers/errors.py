"""Domain exceptions raised by managers.

Routers translate these into HTTP responses:

- ``NotFoundError`` -> 404
- ``BadRequestError`` -> 400
- ``UnauthorizedError`` -> 401
"""

from __future__ import annotations


class NotFoundError(LookupError):
    """A required record does not exist."""


class RoleNotFoundError(NotFoundError):
    """A system role has not been seeded.  Fatal; never retried or auto-created."""


class BadRequestError(ValueError):
    """The request conflicts with existing state."""


class EmailAlreadyExistsError(BadRequestError):
    """A user with this email already exists."""


class IdentityConflictError(BadRequestError):
    """This (provider, provider_id) pair is already linked to a user."""


class UnauthorizedError(PermissionError):
    """Credentials did not match."""
