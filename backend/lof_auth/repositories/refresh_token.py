"""Repository for persisted refresh sessions."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import delete, select

from lof_auth.models.refresh_token import RefreshToken
from lof_auth.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only access to :class:`RefreshToken` rows.

    Bulk deletes run as single ``DELETE`` statements and return the
    affected row count; they never load rows into the session.
    """

    model = RefreshToken

    def _filterable_fields(self):
        return {"user_id": RefreshToken.user_id}

    def create(
        self, *, jti: str, user_id: int, token: str, expires_at: datetime
    ) -> RefreshToken:
        row = RefreshToken(id=jti, user_id=user_id, token=token, expires_at=expires_at)
        return self.add(row)

    def list_for_user(self, user_id: int) -> list[RefreshToken]:
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.user_id == user_id)
            .order_by(RefreshToken.expires_at.asc(), RefreshToken.id.asc())
        )
        return cast(list[RefreshToken], list(self.session.execute(stmt).scalars().all()))

    def delete_by_id(self, jti: str) -> bool:
        """Delete one session by ``jti``; ``True`` when a row was removed."""
        result = self.session.execute(delete(RefreshToken).where(RefreshToken.id == jti))
        return bool(result.rowcount)

    def delete_for_user(self, user_id: int) -> int:
        result = self.session.execute(
            delete(RefreshToken).where(RefreshToken.user_id == user_id)
        )
        return int(result.rowcount or 0)

    def delete_expired_before(self, now: datetime) -> int:
        """Delete rows whose ``expires_at`` is strictly before ``now``."""
        result = self.session.execute(
            delete(RefreshToken).where(RefreshToken.expires_at < now)
        )
        return int(result.rowcount or 0)
