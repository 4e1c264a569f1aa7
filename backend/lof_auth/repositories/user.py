"""User repository for lookups used by registration and login."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from lof_auth.models.user import User
from lof_auth.repositories.base import BaseRepository


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It never issues tokens; it only finds, checks and stages users.
    """

    model = User

    def _filterable_fields(self):
        return {
            "email": User.email,
            "username": User.username,
        }

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalize and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == _normalize_email(email))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == _normalize_email(email))
        return self.session.execute(stmt).first() is not None

    def exists_by_username(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username.strip())
        return self.session.execute(stmt).first() is not None

    def create(
        self,
        *,
        email: str,
        username: str,
        password: str,
        full_name: str | None = None,
    ) -> User:
        """Stage a new user with a hashed password and flush to get its id."""
        user = User(email=email, username=username, full_name=full_name)
        user.password = password
        return self.add(user)

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when the email exists and the password matches.

        :param email: Email address to authenticate.
        :type email: str
        :param password: Raw password to verify.
        :type password: str
        :returns: Authenticated user or ``None`` when credentials fail.
        :rtype: User | None
        """
        user = self.get_by_email(email)
        if user is None or not user.verify_password(password):
            return None
        return user
