"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They serve as stable contracts between repositories, token
infrastructure and application services.

The translation to HTTP responses (RFC 7807) is handled by
``lof_auth/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL includes the constraint name in the message. SQLite reports the
    offending columns instead (``UNIQUE constraint failed: users.email``), so the
    ``uq_<table>_<column>`` convention is also matched against ``<table>.<column>``.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    name = constraint_name.lower()
    if name in message:
        return True
    if name.startswith("uq_"):
        table, _, column = name[3:].partition("_")
        return bool(column) and f"{table}.{column}" in message
    return False


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or domain logic.
    - The API layer will later translate them to APIError.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:  # pragma: no cover
        return f"Conflict on {self.entity}: {self.detail}"


class DuplicateUserError(ConflictError):
    """Raised when registering an email that already belongs to a user."""

    def __init__(self, email: str) -> None:
        super().__init__("User", f"a user with email '{email}' already exists")


class UsernameConflictError(ConflictError):
    """Raised when registering a username that is already taken."""

    def __init__(self, username: str) -> None:
        super().__init__("User", f"username '{username}' is already taken")


class InvalidCredentialsError(ServiceError):
    """
    Login failure.

    Deliberately identical for "unknown email" and "wrong password".
    """

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class InvalidTokenError(ServiceError):
    """Malformed, unsigned, tampered, wrong-type or unknown-identifier token."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class TokenExpiredError(InvalidTokenError):
    """Signature is valid but the token (or its stored record) has lapsed."""

    def __init__(self, message: str = "Token expired") -> None:
        super().__init__(message)
