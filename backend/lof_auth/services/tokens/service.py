# lof_auth/services/tokens/service.py
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum
from typing import Any, cast

from lof_auth.services._shared.errors import InvalidTokenError, TokenExpiredError
from lof_auth.services._shared.ports import (
    REFRESH_TOKEN_TYPE,
    RefreshTokenRecord,
    RefreshTokenStore,
    TokenProvider,
)

from .dto import TokenConfig, TokenPairOut

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RefreshCheck(str, Enum):
    """Outcome of matching a presented refresh token against its record."""

    OK = "ok"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    MISMATCH = "mismatch"


class TokenService:
    """
    Issue, rotate and revoke token pairs.

    A refresh token is only exchangeable while its record exists in the
    store. Rotation inserts the new record before deleting the old one, so a
    crash in between leaves the user with two sessions rather than none.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        refresh_store: RefreshTokenStore,
        config: TokenConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.tokens = token_provider
        self.store = refresh_store
        self.cfg = config or TokenConfig()
        self._clock = clock or _utcnow

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def issue(self, user_id: int, username: str) -> TokenPairOut:
        """
        Sign a new access/refresh pair and persist the refresh session.

        :param user_id: Owner of the new session.
        :param username: Embedded in both tokens' claims.
        :returns: The pair, with ``expires_in`` in access-token seconds.
        :raises Exception: Whatever the store raises; no pair is returned.
        """
        jti = self.store.new_jti()
        refresh = self.tokens.create_refresh_token(
            identity=user_id,
            additional_claims={"username": username},
            expires_delta=self.cfg.refresh_expires,
            jti=jti,
        )
        access = self.tokens.create_access_token(
            identity=user_id,
            additional_claims={"username": username, "sid": jti},
            expires_delta=self.cfg.access_expires,
        )

        record = RefreshTokenRecord(
            jti=jti,
            user_id=int(user_id),
            token=refresh,
            expires_at=self.now() + self.cfg.refresh_expires,
        )
        try:
            self.store.put(record)
        except Exception:
            log.exception("Failed to persist refresh token", extra={"user_id": user_id})
            raise

        return TokenPairOut(
            access_token=access,
            refresh_token=refresh,
            expires_in=int(self.cfg.access_expires.total_seconds()),
        )

    # ------------------------------------------------------------------ #
    # Rotation
    # ------------------------------------------------------------------ #

    def _check(self, record: RefreshTokenRecord | None, presented: str) -> RefreshCheck:
        if record is None:
            return RefreshCheck.NOT_FOUND
        if record.expires_at < self.now():
            return RefreshCheck.EXPIRED
        if record.token != presented:
            return RefreshCheck.MISMATCH
        return RefreshCheck.OK

    def _refresh_claims(self, refresh_token: str) -> dict[str, Any]:
        claims = self.tokens.decode(refresh_token)
        if claims.get("type") != REFRESH_TOKEN_TYPE:
            raise InvalidTokenError("Wrong token type: refresh token required")
        if not claims.get("jti") or not claims.get("sub"):
            raise InvalidTokenError()
        return claims

    def rotate(self, refresh_token: str) -> TokenPairOut:
        """
        Exchange a refresh token for a new pair. Each token works once.

        :raises TokenExpiredError: Token or its record is past expiry.
        :raises InvalidTokenError: Bad signature, unknown, reused or altered token.
        """
        claims = self._refresh_claims(refresh_token)
        jti = str(claims["jti"])
        record = self.store.get(jti)

        result = self._check(record, refresh_token)
        if result is RefreshCheck.NOT_FOUND:
            log.info("Refresh token not found (revoked or rotated)", extra={"jti": jti})
            raise InvalidTokenError()
        if result is RefreshCheck.EXPIRED:
            # Best effort; the caller still learns the token expired
            try:
                self.store.delete(jti)
            except Exception:
                log.exception("Failed to delete expired refresh token", extra={"jti": jti})
            raise TokenExpiredError()
        if result is RefreshCheck.MISMATCH:
            log.warning("Refresh token does not match stored record", extra={"jti": jti})
            raise InvalidTokenError()

        # OK implies the record was found
        owner = cast(RefreshTokenRecord, record).user_id
        pair = self.issue(owner, str(claims.get("username", "")))
        self.store.delete(jti)
        return pair

    # ------------------------------------------------------------------ #
    # Revocation & cleanup
    # ------------------------------------------------------------------ #

    def revoke_one(self, jti: str) -> bool:
        removed = self.store.delete(jti)
        if not removed:
            log.warning("Refresh token to revoke was not found", extra={"jti": jti})
        return removed

    def revoke_all(self, user_id: int) -> int:
        removed = self.store.delete_for_user(user_id)
        log.info(
            "Revoked refresh tokens for user",
            extra={"user_id": user_id, "removed": removed},
        )
        return removed

    def purge_expired(self) -> int:
        """Delete every record whose ``expires_at`` is strictly in the past."""
        removed = self.store.delete_expired_before(self.now())
        log.info("Purged expired refresh tokens", extra={"removed": removed})
        return removed
