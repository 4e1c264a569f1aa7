"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from lof_auth.core.extensions import db
from lof_auth.repositories import RefreshTokenRepository, UserRepository
from lof_auth.uow.base import UnitOfWork

log = logging.getLogger(__name__)


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.refresh_tokens = RefreshTokenRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    Commits when the block exits cleanly, rolls back otherwise.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session begins lazily on first use.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped SQLAlchemy session.

    Installs write guards on the session (ORM flushes) and the connection
    (raw DML/DDL), and always rolls back on exit. On PostgreSQL and MySQL it
    also issues ``SET TRANSACTION READ ONLY`` when it owns the transaction.
    When a transaction is already running on the session the scope attaches
    to it and relies on the guards alone.
    """

    _WRITE_PREFIXES = (
        "insert",
        "update",
        "delete",
        "merge",
        "alter",
        "drop",
        "truncate",
        "create",
        "replace",
    )
    _READONLY_DIALECTS = ("postgresql", "mysql", "mariadb")

    def __init__(self, *, enforce_db_readonly: bool = True) -> None:
        super().__init__(session=db.session)
        self.enforce_db_readonly = enforce_db_readonly
        self._conn: Connection | None = None
        self._txn_ctx: SessionTransaction | None = None
        self._listeners_installed = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._txn_ctx = None
        try:
            txn_ctx = self.session.begin()
            txn_ctx.__enter__()
            self._txn_ctx = txn_ctx
        except InvalidRequestError:
            # Already inside a transaction (autobegin or test fixture)
            pass

        self._conn = self.session.connection()
        self._install_listeners()

        if (
            self._txn_ctx is not None
            and self.enforce_db_readonly
            and self._conn.dialect.name in self._READONLY_DIALECTS
        ):
            try:
                self.session.execute(text("SET TRANSACTION READ ONLY"))
            except SQLAlchemyError as exc:
                log.warning("SET TRANSACTION READ ONLY failed (%s); guards only.", exc)

        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._txn_ctx is not None:
                self.session.rollback()
                try:
                    self._txn_ctx.__exit__(exc_type, exc, tb)
                finally:
                    self._txn_ctx = None
        finally:
            self._remove_listeners()
            self._conn = None

    def commit(self) -> None:
        """
        :raises RuntimeError: always; this scope never writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ----------------------------- Guards & Listeners --------------------------

    def _install_listeners(self) -> None:
        if self._listeners_installed:
            return

        def _before_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")

        def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            first_token = statement.lstrip().split(None, 1)[0].lower() if statement else ""
            if first_token.startswith(self._WRITE_PREFIXES):
                raise RuntimeError(
                    f"Read-only UnitOfWork: SQL statement blocked: {first_token.upper()}"
                )

        event.listen(self.session, "before_flush", _before_flush)
        target = self._conn if self._conn is not None else self.session.get_bind()
        event.listen(target, "before_cursor_execute", _before_cursor_execute)

        self._ro_before_flush = _before_flush
        self._ro_before_cursor_execute = _before_cursor_execute
        self._ro_target = target
        self._listeners_installed = True

    def _remove_listeners(self) -> None:
        if not self._listeners_installed:
            return
        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", self._ro_before_flush)
        with suppress(InvalidRequestError):
            event.remove(self._ro_target, "before_cursor_execute", self._ro_before_cursor_execute)
        self._listeners_installed = False
