"""Unit tests for RefreshTokenRepository."""

from datetime import UTC, datetime, timedelta

import pytest

from lof_auth.repositories.refresh_token import RefreshTokenRepository
from tests.factories.refresh_token import RefreshTokenFactory
from tests.factories.user import UserFactory

NOW = datetime(2030, 1, 1, tzinfo=UTC)


class TestRefreshTokenRepository:
    @pytest.fixture()
    def repo(self):
        return RefreshTokenRepository()

    def test_create_and_get(self, repo, session):
        user = UserFactory()
        repo.create(jti="abc", user_id=user.id, token="tok", expires_at=NOW)

        row = repo.get("abc")
        assert row is not None
        assert row.user_id == user.id
        assert row.token == "tok"

    def test_delete_by_id(self, repo, session):
        row = RefreshTokenFactory()
        assert repo.delete_by_id(row.id) is True
        assert repo.delete_by_id(row.id) is False

    def test_delete_for_user_only_touches_that_user(self, repo, session):
        alice, bob = UserFactory(), UserFactory()
        RefreshTokenFactory(user=alice)
        RefreshTokenFactory(user=alice)
        kept = RefreshTokenFactory(user=bob)

        assert repo.delete_for_user(alice.id) == 2
        assert repo.list_for_user(alice.id) == []
        assert [r.id for r in repo.list_for_user(bob.id)] == [kept.id]

    def test_delete_expired_before_is_strict(self, repo, session):
        user = UserFactory()
        RefreshTokenFactory(user=user, id="past", expires_at=NOW - timedelta(seconds=1))
        RefreshTokenFactory(user=user, id="edge", expires_at=NOW)
        RefreshTokenFactory(user=user, id="future", expires_at=NOW + timedelta(days=1))
        session.flush()

        assert repo.delete_expired_before(NOW) == 1
        assert {r.id for r in repo.list_for_user(user.id)} == {"edge", "future"}
