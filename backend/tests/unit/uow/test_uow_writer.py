"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from lof_auth.models import RefreshToken, User
from lof_auth.uow import SQLAlchemyUnitOfWork
from tests.factories.user import UserFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, app, db, session):
        """
        GIVEN a writer UoW
        WHEN a user is added inside the context and the block exits cleanly
        THEN the row is visible afterwards.
        """
        initial = db.session.query(User).count()

        with SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())

        assert db.session.query(User).count() == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, app, db, session):
        initial = db.session.query(User).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())
            raise RuntimeError("boom")

        assert db.session.query(User).count() == initial

    def test_repositories_share_the_session(self, app, db, session):
        with SQLAlchemyUnitOfWork() as uow:
            assert uow.users.session is uow.refresh_tokens.session
            user = uow.users.add(UserFactory.build())
            uow.refresh_tokens.create(
                jti="shared", user_id=user.id, token="t", expires_at=datetime(2030, 1, 1, tzinfo=UTC)
            )

        assert db.session.get(RefreshToken, "shared") is not None
