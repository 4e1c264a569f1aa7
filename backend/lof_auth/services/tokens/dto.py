# lof_auth/services/tokens/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from .durations import DEFAULT_ACCESS_SECONDS, DEFAULT_REFRESH_SECONDS, parse_duration

TOKEN_TYPE_BEARER = "bearer"


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    :param expires_in: Access token lifetime in seconds.
    :type expires_in: int
    """

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = field(default=TOKEN_TYPE_BEARER)


@dataclass(frozen=True, slots=True)
class TokenConfig:
    """
    Token emission configuration.

    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    access_expires: timedelta = timedelta(seconds=DEFAULT_ACCESS_SECONDS)
    refresh_expires: timedelta = timedelta(seconds=DEFAULT_REFRESH_SECONDS)

    @classmethod
    def from_mapping(cls, config: Any) -> TokenConfig:
        """Build from Flask-style config holding ``JWT_*_EXPIRES_IN`` strings."""
        access = parse_duration(
            config.get("JWT_ACCESS_EXPIRES_IN"),
            default=DEFAULT_ACCESS_SECONDS,
            setting="JWT_ACCESS_EXPIRES_IN",
        )
        refresh = parse_duration(
            config.get("JWT_REFRESH_EXPIRES_IN"),
            default=DEFAULT_REFRESH_SECONDS,
            setting="JWT_REFRESH_EXPIRES_IN",
        )
        return cls(
            access_expires=timedelta(seconds=access),
            refresh_expires=timedelta(seconds=refresh),
        )
