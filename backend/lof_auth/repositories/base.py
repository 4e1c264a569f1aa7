"""Generic repository base for SQLAlchemy 2.x.

Repositories stay persistence-only:

- no commit/rollback, services own the transaction through a unit of work;
- no business rules, only lookups and staged writes;
- equality filters honor an optional per-repository whitelist.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, and_, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from lof_auth.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Persistence-only repository for a single aggregate.

    Subclasses MUST set ``model``. They MAY override
    ``_filterable_fields`` to restrict which columns equality filters touch.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """
        :param session: Session shared across the unit-of-work scope. Falls
            back to the Flask-scoped ``db.session`` when omitted.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]] | None:
        """Whitelist of equality-filterable fields.

        ``None`` means any mapped attribute may be used; a mapping restricts
        filters to its keys and silently ignores the rest.
        """
        return None

    def _apply_equality_filters(
        self,
        stmt: Select[Any],
        filters: Mapping[str, Any] | None,
    ) -> Select[Any]:
        if not filters:
            return stmt

        allowed = self._filterable_fields()
        if allowed is None:
            clauses = [getattr(self.model, k) == v for k, v in filters.items()]
        else:
            clauses = [
                allowed[k] == v
                for k, v in filters.items()
                if isinstance(allowed.get(k), InstrumentedAttribute)
            ]
        return stmt.where(and_(*clauses)) if clauses else stmt

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush so database defaults materialize.

        :param instance: New entity instance.
        :returns: The same instance after ``flush()``.
        """
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key.

        :raises RuntimeError: If no PK attribute can be detected.
        """
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        result = self.session.execute(select(self.model).where(pk_attr == entity_id))
        return cast(E | None, result.scalars().first())

    def find_one(self, **filters: Any) -> E | None:
        """Find a single entity by simple equality filters."""
        stmt: Select[Any] = self._apply_equality_filters(select(self.model), filters)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def exists(self, **filters: Any) -> bool:
        """Return ``True`` when at least one row matches the filters."""
        stmt: Select[Any] = select(func.count()).select_from(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        return bool(self.session.execute(stmt).scalar())

    def delete(self, instance: E) -> None:
        """Delete an entity and flush."""
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()
