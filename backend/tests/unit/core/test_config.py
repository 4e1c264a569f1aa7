# tests/unit/core/test_config.py
from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from lof_auth.core.config import (
    ConfigurationError,
    TestingConfig as _TestingConfig,
    env_int,
    parse_bool,
    validate_jwt_config,
)
from lof_auth.factory import create_app
from lof_auth.services.tokens import TokenConfig


class NoSecretConfig(_TestingConfig):
    JWT_SECRET_KEY = None


@pytest.mark.parametrize("secret", [None, "", "   "])
def test_validate_rejects_missing_secret(secret):
    with pytest.raises(ConfigurationError):
        validate_jwt_config({"JWT_SECRET_KEY": secret})


def test_validate_warns_on_short_secret(caplog):
    with caplog.at_level(logging.WARNING, logger="lof_auth.core.config"):
        validate_jwt_config({"JWT_SECRET_KEY": "short", "JWT_ACCESS_EXPIRES_IN": "15m"})

    assert any("too short" in r.getMessage() for r in caplog.records)


def test_validate_accepts_long_secret():
    validate_jwt_config({"JWT_SECRET_KEY": "x" * 48, "JWT_ACCESS_EXPIRES_IN": "15m"})


def test_create_app_refuses_to_start_without_secret():
    with pytest.raises(ConfigurationError):
        create_app(NoSecretConfig)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("true", True), (" YES ", True), ("on", True), ("0", False), ("nope", False)],
)
def test_parse_bool(raw, expected):
    assert parse_bool(raw) is expected


def test_parse_bool_default_when_missing():
    assert parse_bool(None) is False
    assert parse_bool(None, default=True) is True


def test_env_int_falls_back_on_garbage(monkeypatch):
    monkeypatch.setenv("LOF_TEST_INT", "twelve")
    assert env_int("LOF_TEST_INT", 7) == 7

    monkeypatch.setenv("LOF_TEST_INT", "12")
    assert env_int("LOF_TEST_INT", 7) == 12


def test_token_config_from_mapping():
    cfg = TokenConfig.from_mapping({"JWT_ACCESS_EXPIRES_IN": "5m", "JWT_REFRESH_EXPIRES_IN": "2d"})

    assert cfg.access_expires == timedelta(minutes=5)
    assert cfg.refresh_expires == timedelta(days=2)


def test_token_config_falls_back_on_bad_values():
    cfg = TokenConfig.from_mapping({"JWT_ACCESS_EXPIRES_IN": "soon", "JWT_REFRESH_EXPIRES_IN": "7w"})

    assert cfg.access_expires == timedelta(seconds=900)
    assert cfg.refresh_expires == timedelta(seconds=604800)
