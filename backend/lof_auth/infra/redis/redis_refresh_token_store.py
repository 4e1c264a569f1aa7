# comments in English; reST docstrings
from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, cast
from uuid import uuid4

import redis  # type: ignore[import-untyped]

from lof_auth.services._shared.ports import RefreshTokenRecord, RefreshTokenStore

# Keys outlive their expiry by this much so the sweep and rotation still
# observe "expired" instead of "missing".
EXPIRY_GRACE_SECONDS = 3600


def _s(value: Any) -> str:
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store.

    Layout
    ------
    - ``rt:{jti}``: hash with ``user_id``, ``token`` and ``expires_at`` (ISO).
    - ``rt:u:{user_id}``: set of the user's live ``jti`` values.
    - ``rt:exp``: sorted set of ``jti`` scored by expiry timestamp, used by
      the bulk sweep.
    - ``rt:owner``: hash ``jti -> user_id`` without TTL, so the sweep can
      clean ``rt:u:{user_id}`` after the session hash has lapsed.

    Each operation runs as one MULTI/EXEC pipeline.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    @staticmethod
    def _k(jti: str) -> str:
        return f"rt:{jti}"

    @staticmethod
    def _ku(user_id: int | str) -> str:
        return f"rt:u:{user_id}"

    EXP_INDEX = "rt:exp"
    OWNER_INDEX = "rt:owner"

    def _owners(self, jtis: list[str]) -> list[str | None]:
        """Owner of each ``jti``, read from the index that outlives the hashes."""
        return [
            _s(uid) if uid is not None else None
            for uid in self.r.hmget(self.OWNER_INDEX, jtis)
        ]

    def _drop(self, pipe: Any, jti: str, user_id: str | None) -> None:
        # Queues DEL, HDEL, ZREM and then SREM when the owner is known.
        pipe.delete(self._k(jti))
        pipe.hdel(self.OWNER_INDEX, jti)
        pipe.zrem(self.EXP_INDEX, jti)
        if user_id is not None:
            pipe.srem(self._ku(user_id), jti)

    # -------------------- API ------------------------

    def new_jti(self) -> str:
        return uuid4().hex

    def put(self, record: RefreshTokenRecord) -> None:
        """
        Insert the refresh session *before* the token is handed to the client.
        """
        key = self._k(record.jti)
        expires_ts = record.expires_at.timestamp()
        ttl = max(1, int(expires_ts - time.time())) + EXPIRY_GRACE_SECONDS

        pipe = self.r.pipeline(transaction=True)
        pipe.hset(
            key,
            mapping={
                "user_id": str(record.user_id),
                "token": record.token,
                "expires_at": record.expires_at.astimezone(UTC).isoformat(),
            },
        )
        pipe.expire(key, ttl)
        pipe.hset(self.OWNER_INDEX, record.jti, str(record.user_id))
        pipe.sadd(self._ku(record.user_id), record.jti)
        pipe.zadd(self.EXP_INDEX, {record.jti: expires_ts})
        pipe.execute()

    def get(self, jti: str) -> RefreshTokenRecord | None:
        h = {_s(k): _s(v) for k, v in self.r.hgetall(self._k(jti)).items()}
        if not h:
            return None
        return RefreshTokenRecord(
            jti=jti,
            user_id=int(h["user_id"]),
            token=h["token"],
            expires_at=datetime.fromisoformat(h["expires_at"]),
        )

    def delete(self, jti: str) -> bool:
        (uid,) = self._owners([jti])
        with self.r.pipeline(transaction=True) as p:
            self._drop(p, jti, uid)
            out = cast(list[int], p.execute())
        return bool(out[0] or out[2])

    def delete_for_user(self, user_id: int) -> int:
        key_u = self._ku(user_id)
        jtis = [_s(m) for m in self.r.smembers(key_u)]
        if not jtis:
            return 0
        with self.r.pipeline(transaction=True) as p:
            p.delete(*(self._k(j) for j in jtis))
            p.hdel(self.OWNER_INDEX, *jtis)
            p.zrem(self.EXP_INDEX, *jtis)
            p.delete(key_u)
            out = cast(list[int], p.execute())
        return int(out[2])

    def delete_expired_before(self, now: datetime) -> int:
        """
        Delete records with ``expires_at < now`` (exclusive bound).

        Sessions whose hash already lapsed through its TTL are still counted
        and removed from every index.
        """
        jtis = [
            _s(m)
            for m in self.r.zrangebyscore(self.EXP_INDEX, "-inf", f"({now.timestamp()}")
        ]
        if not jtis:
            return 0

        uids = self._owners(jtis)
        with self.r.pipeline(transaction=True) as p:
            for j, uid in zip(jtis, uids, strict=True):
                self._drop(p, j, uid)
            out = p.execute()

        # ZREM is the third reply of each _drop; a concurrent delete yields 0.
        removed = 0
        idx = 0
        for uid in uids:
            removed += int(out[idx + 2])
            idx += 4 if uid is not None else 3
        return removed
