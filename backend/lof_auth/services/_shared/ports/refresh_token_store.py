from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import uuid4


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Persisted refresh session.

    A record exists if and only if its refresh token may still be exchanged.

    :ivar jti: Token identifier (primary key, embedded in the refresh token).
    :ivar user_id: Owner user id.
    :ivar token: Raw signed refresh token string.
    :ivar expires_at: Absolute expiration (aware UTC).
    """

    jti: str
    user_id: int
    token: str
    expires_at: datetime


class RefreshTokenStore(Protocol):
    """
    Stateful store for refresh sessions.

    Every operation is atomic on its own; callers never wrap several of them
    in one transaction. Deletes are idempotent.
    """

    def put(self, record: RefreshTokenRecord) -> None:
        """Insert a record. MUST complete before the token reaches the client."""

    def get(self, jti: str) -> RefreshTokenRecord | None:
        """Fetch a single record (if present)."""

    def delete(self, jti: str) -> bool:
        """Delete one record. :returns: True if it existed."""

    def delete_for_user(self, user_id: int) -> int:
        """Delete every record owned by ``user_id``. :returns: Number removed."""

    def delete_expired_before(self, now: datetime) -> int:
        """Delete records with ``expires_at < now``. :returns: Number removed."""

    def new_jti(self) -> str:
        """Generate a new random refresh token identifier."""
        return uuid4().hex


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh session store.

    .. note::
       Uses a threading lock so each operation is atomic across threads.
    """

    def __init__(self) -> None:
        self._by_jti: dict[str, RefreshTokenRecord] = {}
        self._lock = threading.Lock()

    def new_jti(self) -> str:
        return uuid4().hex

    def put(self, record: RefreshTokenRecord) -> None:
        with self._lock:
            self._by_jti[record.jti] = record

    def get(self, jti: str) -> RefreshTokenRecord | None:
        with self._lock:
            return self._by_jti.get(jti)

    def delete(self, jti: str) -> bool:
        with self._lock:
            return self._by_jti.pop(jti, None) is not None

    def delete_for_user(self, user_id: int) -> int:
        with self._lock:
            doomed = [j for j, r in self._by_jti.items() if r.user_id == user_id]
            for j in doomed:
                del self._by_jti[j]
            return len(doomed)

    def delete_expired_before(self, now: datetime) -> int:
        with self._lock:
            doomed = [j for j, r in self._by_jti.items() if r.expires_at < now]
            for j in doomed:
                del self._by_jti[j]
            return len(doomed)

    def list_user_records(self, user_id: int) -> list[RefreshTokenRecord]:
        """Return the user's records (test/inspection helper)."""
        with self._lock:
            return [r for r in self._by_jti.values() if r.user_id == user_id]
