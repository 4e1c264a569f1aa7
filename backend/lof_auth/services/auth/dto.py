# lof_auth/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from lof_auth.services.tokens.dto import TokenPairOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param email: User email (normalized by the service).
    :param username: Public handle, unique.
    :param password: Raw password; hashed by the model setter.
    :param full_name: Optional real name.
    """

    email: str
    username: str
    password: str
    full_name: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param user_id: Authenticated user.
    :param token_id: Refresh session to end (``sid`` of the access token).
    :param all_sessions: If True, revoke every session of the user.
    """

    user_id: int
    token_id: str | None = None
    all_sessions: bool = False


__all__ = ["LoginIn", "LogoutIn", "RefreshIn", "RegisterIn", "TokenPairOut"]
