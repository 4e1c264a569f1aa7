from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol
from uuid import uuid4

from lof_auth.services._shared.errors import InvalidTokenError, TokenExpiredError

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenProvider(Protocol):
    """
    Port for signing and verifying tokens.

    ``decode`` verifies signature, issuer, audience and expiry (with the
    configured clock-skew leeway) and returns the claims.

    :raises TokenExpiredError: Signature valid but ``exp`` has passed.
    :raises InvalidTokenError: Anything else wrong with the token.
    """

    def create_access_token(
        self,
        *,
        identity: int | str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str: ...

    def create_refresh_token(
        self,
        *,
        identity: int | str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
        jti: str,
    ) -> str: ...

    def decode(self, token: str) -> dict[str, Any]: ...


class StubTokenProvider(TokenProvider):
    """
    Deterministic token provider used in unit tests.

    Tokens are opaque strings mapped to their claims; a token the stub never
    issued decodes as invalid, and ``exp`` is checked against ``clock``.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] | None = None,
        issuer: str = "lots-of-fun-app",
        audience: str = "lots-of-fun-users",
    ) -> None:
        self._clock = clock or (lambda: datetime.now(tz=UTC))
        self.issuer = issuer
        self.audience = audience
        self._seq = 0
        self._issued: dict[str, dict[str, Any]] = {}

    def _mk(
        self,
        *,
        identity: int | str,
        ttype: str,
        exp_delta: timedelta,
        jti: str | None = None,
        additional_claims: dict[str, Any] | None = None,
    ) -> str:
        self._seq += 1
        now = self._clock()
        jti_value = jti or uuid4().hex
        token = f"{ttype}.{identity}.{jti_value}.{self._seq}"
        payload: dict[str, Any] = {
            "sub": str(identity),
            "type": ttype,
            "jti": jti_value,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": int(now.timestamp()),
            "exp": int((now + exp_delta).timestamp()),
        }
        if additional_claims:
            payload.update(additional_claims)
        self._issued[token] = payload
        return token

    def create_access_token(
        self,
        *,
        identity: int | str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        return self._mk(
            identity=identity,
            ttype=ACCESS_TOKEN_TYPE,
            exp_delta=expires_delta or timedelta(minutes=15),
            additional_claims=additional_claims,
        )

    def create_refresh_token(
        self,
        *,
        identity: int | str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
        jti: str,
    ) -> str:
        return self._mk(
            identity=identity,
            ttype=REFRESH_TOKEN_TYPE,
            exp_delta=expires_delta or timedelta(days=7),
            jti=jti,
            additional_claims=additional_claims,
        )

    def decode(self, token: str) -> dict[str, Any]:
        payload = self._issued.get(token)
        if payload is None:
            raise InvalidTokenError("Unknown token")
        if payload["exp"] < int(self._clock().timestamp()):
            raise TokenExpiredError()
        return dict(payload)
