# lof_auth/services/auth/service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from lof_auth.repositories.user import UserRepository
from lof_auth.services._shared.base import BaseService
from lof_auth.services._shared.errors import (
    ConflictError,
    DuplicateUserError,
    InvalidCredentialsError,
    UsernameConflictError,
    violates,
)
from lof_auth.services.auth.dto import LoginIn, LogoutIn, RefreshIn, RegisterIn
from lof_auth.services.tokens.dto import TokenPairOut
from lof_auth.services.tokens.service import TokenService

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Authentication lifecycle service (register / login / refresh / logout).

    User persistence goes through units of work; everything token related is
    delegated to :class:`TokenService`.
    """

    def __init__(self, *, token_service: TokenService) -> None:
        self.tokens = token_service

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> TokenPairOut:
        """
        Create a user and issue their first token pair.

        :raises DuplicateUserError: Email already registered.
        :raises UsernameConflictError: Username already taken.
        """
        email = dto.email.strip().lower()
        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                if repo.exists_by_email(email):
                    raise DuplicateUserError(email)
                if repo.exists_by_username(dto.username):
                    raise UsernameConflictError(dto.username)

                user = repo.create(
                    email=email,
                    username=dto.username,
                    password=dto.password,
                    full_name=dto.full_name,
                )
                user_id, username = user.id, user.username
        except IntegrityError as exc:
            # Lost a race with a concurrent registration
            if violates(exc, "uq_users_email"):
                raise DuplicateUserError(email) from exc
            if violates(exc, "uq_users_username"):
                raise UsernameConflictError(dto.username) from exc
            raise ConflictError("User", "registration conflict") from exc

        log.info("User registered", extra={"user_id": user_id})
        return self.tokens.issue(user_id, username)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :raises InvalidCredentialsError: Unknown email or wrong password.
        """
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.authenticate(dto.email, dto.password)
            if user is None:
                raise InvalidCredentialsError()
            user_id, username = user.id, user.username

        return self.tokens.issue(user_id, username)

    # ------------------------------------------------------------------ #
    # Refresh / logout
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        return self.tokens.rotate(dto.refresh_token)

    def logout(self, dto: LogoutIn) -> int:
        """
        End the current session, or all of them.

        :returns: Number of refresh sessions removed.
        """
        if dto.token_id and not dto.all_sessions:
            return 1 if self.tokens.revoke_one(dto.token_id) else 0
        return self.tokens.revoke_all(dto.user_id)
