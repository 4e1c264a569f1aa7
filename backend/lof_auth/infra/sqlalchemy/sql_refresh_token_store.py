# lof_auth/infra/sqlalchemy/sql_refresh_token_store.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4

from lof_auth.models.refresh_token import RefreshToken
from lof_auth.services._shared.ports import RefreshTokenRecord, RefreshTokenStore
from lof_auth.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork
from lof_auth.uow.base import UnitOfWork


def _to_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        jti=row.id,
        user_id=row.user_id,
        token=row.token,
        expires_at=row.expires_at,
    )


@dataclass(slots=True)
class SQLRefreshTokenStore(RefreshTokenStore):
    """
    Relational refresh token store on the ``refresh_tokens`` table.

    Every call runs in its own unit of work and commits before returning,
    so a stored record is visible to other workers as soon as ``put`` ends.

    .. note::
       Requires an active Flask app context (Flask-scoped session).
    """

    uow_factory: Callable[[], UnitOfWork] = field(default=SQLAlchemyUnitOfWork)
    ro_uow_factory: Callable[[], UnitOfWork] = field(default=SQLAlchemyReadOnlyUnitOfWork)

    def new_jti(self) -> str:
        return uuid4().hex

    def put(self, record: RefreshTokenRecord) -> None:
        with self.uow_factory() as uow:
            uow.refresh_tokens.create(
                jti=record.jti,
                user_id=record.user_id,
                token=record.token,
                expires_at=record.expires_at,
            )

    def get(self, jti: str) -> RefreshTokenRecord | None:
        with self.ro_uow_factory() as uow:
            row = uow.refresh_tokens.get(jti)
            return _to_record(row) if row is not None else None

    def delete(self, jti: str) -> bool:
        with self.uow_factory() as uow:
            return uow.refresh_tokens.delete_by_id(jti)

    def delete_for_user(self, user_id: int) -> int:
        with self.uow_factory() as uow:
            return uow.refresh_tokens.delete_for_user(user_id)

    def delete_expired_before(self, now: datetime) -> int:
        with self.uow_factory() as uow:
            return uow.refresh_tokens.delete_expired_before(now)

    def list_user_records(self, user_id: int) -> list[RefreshTokenRecord]:
        with self.ro_uow_factory() as uow:
            return [_to_record(r) for r in uow.refresh_tokens.list_for_user(user_id)]
