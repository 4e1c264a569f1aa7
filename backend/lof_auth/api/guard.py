"""Bearer-token verification for protected endpoints."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from lof_auth.core.errors import Unauthorized
from lof_auth.services._shared.errors import InvalidTokenError
from lof_auth.services._shared.ports import ACCESS_TOKEN_TYPE, TokenProvider

log = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
REJECTION_MESSAGE = "Invalid or expired token"
DEFAULT_MAX_AGE = timedelta(days=7)


@dataclass(frozen=True, slots=True)
class AuthIdentity:
    """
    Identity attached to an authenticated request.

    :param user_id: Subject of the access token.
    :param username: ``username`` claim.
    :param token_id: Refresh session the access token was paired with.
    :param claims: Full verified claim set.
    """

    user_id: int
    username: str
    token_id: str | None = None
    claims: dict[str, Any] = field(default_factory=dict)


class RequestAuthGuard:
    """
    Validate ``Authorization: Bearer <token>`` headers.

    Every rejection raises the same :class:`Unauthorized` so callers cannot
    tell which gate failed; the reason is only logged.
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        *,
        max_age: timedelta = DEFAULT_MAX_AGE,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.tokens = token_provider
        self.max_age = max_age
        self._clock = clock or (lambda: datetime.now(UTC))

    def _reject(self, reason: str, *, level: int = logging.DEBUG) -> Unauthorized:
        log.log(level, "Rejected bearer token: %s", reason)
        return Unauthorized(REJECTION_MESSAGE)

    def authenticate(self, authorization: str | None) -> AuthIdentity:
        """
        Verify the header and return the caller identity.

        :param authorization: Raw ``Authorization`` header value.
        :raises Unauthorized: On any failed check.
        """
        if not authorization:
            raise self._reject("missing authorization header")
        if not authorization.startswith(BEARER_PREFIX):
            raise self._reject("authorization header is not a bearer token")
        token = authorization[len(BEARER_PREFIX) :].strip()
        if not token:
            raise self._reject("empty bearer token")

        try:
            claims = self.tokens.decode(token)
        except InvalidTokenError as exc:
            raise self._reject(str(exc)) from exc

        if claims.get("type") != ACCESS_TOKEN_TYPE:
            raise self._reject("not an access token", level=logging.WARNING)

        sub, username = claims.get("sub"), claims.get("username")
        if not sub or not username:
            raise self._reject("missing subject or username claim", level=logging.WARNING)
        try:
            user_id = int(sub)
        except (TypeError, ValueError) as exc:
            raise self._reject("non-numeric subject", level=logging.WARNING) from exc

        iat = claims.get("iat")
        if not isinstance(iat, int | float):
            raise self._reject("missing issued-at claim", level=logging.WARNING)
        age = self._clock() - datetime.fromtimestamp(iat, tz=UTC)
        if age > self.max_age:
            raise self._reject("token older than the allowed maximum age", level=logging.WARNING)

        return AuthIdentity(
            user_id=user_id,
            username=str(username),
            token_id=claims.get("sid"),
            claims=dict(claims),
        )
