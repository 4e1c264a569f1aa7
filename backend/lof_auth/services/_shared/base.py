# lof_auth/services/_shared/base.py
from __future__ import annotations

from http import HTTPStatus

from lof_auth.core import errors as api_errors
from lof_auth.services._shared.errors import (
    ConflictError,
    DuplicateUserError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    ServiceError,
    TokenExpiredError,
    UsernameConflictError,
)
from lof_auth.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize error translation.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    Services must never touch the global session directly; always use a Unit of Work.
    """

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self, *, enforce_db_readonly: bool = True) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param enforce_db_readonly: Apply `SET TRANSACTION READ ONLY` when supported.
        :type enforce_db_readonly: bool
        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(enforce_db_readonly=enforce_db_readonly)

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        Order matters: specific subclasses are checked before their bases.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, DuplicateUserError):
            return api_errors.Conflict(str(exc), code="duplicate_user")

        if isinstance(exc, UsernameConflictError):
            return api_errors.Conflict(str(exc), code="username_conflict")

        if isinstance(exc, ConflictError):
            return api_errors.Conflict(str(exc))

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, InvalidCredentialsError):
            return api_errors.Unauthorized(str(exc), code="invalid_credentials")

        if isinstance(exc, TokenExpiredError):
            return api_errors.Unauthorized(str(exc), code="token_expired")

        if isinstance(exc, InvalidTokenError):
            return api_errors.Unauthorized(str(exc), code="invalid_token")

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(
                message=str(exc),
                status_code=HTTPStatus.BAD_REQUEST,
                code="bad_request",
            )

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
