# tests/unit/services/test_auth_service.py
from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from lof_auth.models.user import User
from lof_auth.services._shared.errors import (
    ConflictError,
    DuplicateUserError,
    InvalidCredentialsError,
    InvalidTokenError,
    UsernameConflictError,
)
from lof_auth.services._shared.ports import InMemoryRefreshTokenStore, StubTokenProvider
from lof_auth.services.auth.dto import LoginIn, LogoutIn, RefreshIn, RegisterIn
from lof_auth.services.auth.service import AuthService
from lof_auth.services.tokens import TokenPairOut, TokenService
from tests.factories.user import UserFactory


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def store() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


@pytest.fixture()
def provider(clock) -> StubTokenProvider:
    return StubTokenProvider(clock=clock)


@pytest.fixture()
def service(provider, store, clock) -> AuthService:
    """Build an AuthService wired to in-memory token doubles and the test DB."""
    tokens = TokenService(token_provider=provider, refresh_store=store, clock=clock)
    return AuthService(token_service=tokens)


def _register(service, **overrides) -> TokenPairOut:
    data = {
        "email": "neo@example.com",
        "username": "neo",
        "password": "follow-the-rabbit",
    }
    data.update(overrides)
    return service.register(RegisterIn(**data))


# ------------------------------- Register --------------------------------- #
def test_register_creates_user_and_issues_pair(service, provider, store, session):
    pair = _register(service, email="  Neo@Example.COM ")

    user = session.query(User).filter_by(username="neo").one()
    assert user.email == "neo@example.com"
    assert user.verify_password("follow-the-rabbit")

    claims = provider.decode(pair.access_token)
    assert claims["sub"] == str(user.id)
    assert claims["username"] == "neo"
    assert len(store.list_user_records(user.id)) == 1


def test_register_duplicate_email(service, session):
    _register(service)
    with pytest.raises(DuplicateUserError):
        _register(service, username="another", email="NEO@example.com")


def test_register_duplicate_username(service, session):
    _register(service)
    with pytest.raises(UsernameConflictError):
        _register(service, email="other@example.com")


def test_register_translates_integrity_error(service, session, monkeypatch):
    """A concurrent insert that slips past the pre-checks still maps to a conflict."""

    class _Orig(Exception):
        def __str__(self) -> str:
            return "UNIQUE constraint failed: users.email"

    def _boom(self, **kwargs):
        raise IntegrityError("INSERT INTO users", {}, _Orig())

    monkeypatch.setattr("lof_auth.repositories.user.UserRepository.create", _boom)
    with pytest.raises(DuplicateUserError):
        _register(service)


def test_register_unknown_integrity_error_is_generic_conflict(service, session, monkeypatch):
    def _boom(self, **kwargs):
        raise IntegrityError("INSERT INTO users", {}, Exception("something else"))

    monkeypatch.setattr("lof_auth.repositories.user.UserRepository.create", _boom)
    with pytest.raises(ConflictError) as exc:
        _register(service)
    assert not isinstance(exc.value, (DuplicateUserError, UsernameConflictError))


# -------------------------------- Login ----------------------------------- #
def test_login_issues_token_pair(service, provider, store, session):
    user = UserFactory(email="a@a.com", password="correct-horse")
    session.flush()

    pair = service.login(LoginIn(email="A@a.com", password="correct-horse"))
    assert isinstance(pair, TokenPairOut)
    assert provider.decode(pair.refresh_token)["sub"] == str(user.id)
    assert len(store.list_user_records(user.id)) == 1


def test_login_invalid_credentials_are_indistinguishable(service, session):
    UserFactory(email="b@b.com", password="correct-horse")
    session.flush()

    with pytest.raises(InvalidCredentialsError) as wrong_pw:
        service.login(LoginIn(email="b@b.com", password="wrong"))
    with pytest.raises(InvalidCredentialsError) as unknown:
        service.login(LoginIn(email="missing@example.com", password="wrong"))
    assert str(wrong_pw.value) == str(unknown.value)


# --------------------------- Refresh / logout ----------------------------- #
def test_refresh_rotates_and_blocks_reuse(service, session):
    UserFactory(email="r@r.com", password="correct-horse")
    session.flush()
    pair1 = service.login(LoginIn(email="r@r.com", password="correct-horse"))

    pair2 = service.refresh(RefreshIn(refresh_token=pair1.refresh_token))
    assert pair2.refresh_token != pair1.refresh_token

    with pytest.raises(InvalidTokenError):
        service.refresh(RefreshIn(refresh_token=pair1.refresh_token))


def test_logout_current_session_only(service, provider, store, session):
    user = UserFactory(email="l@l.com", password="correct-horse")
    session.flush()
    phone = service.login(LoginIn(email="l@l.com", password="correct-horse"))
    laptop = service.login(LoginIn(email="l@l.com", password="correct-horse"))

    sid = provider.decode(phone.access_token)["sid"]
    assert service.logout(LogoutIn(user_id=user.id, token_id=sid)) == 1

    with pytest.raises(InvalidTokenError):
        service.refresh(RefreshIn(refresh_token=phone.refresh_token))
    service.refresh(RefreshIn(refresh_token=laptop.refresh_token))


def test_logout_all_sessions(service, store, session):
    user = UserFactory(email="m@m.com", password="correct-horse")
    session.flush()
    for _ in range(3):
        service.login(LoginIn(email="m@m.com", password="correct-horse"))

    removed = service.logout(LogoutIn(user_id=user.id, token_id="ignored", all_sessions=True))
    assert removed == 3
    assert store.list_user_records(user.id) == []


def test_logout_without_session_id_revokes_all(service, store, session):
    user = UserFactory(email="n@n.com", password="correct-horse")
    session.flush()
    service.login(LoginIn(email="n@n.com", password="correct-horse"))

    assert service.logout(LogoutIn(user_id=user.id)) == 1
