# tests/unit/services/test_durations.py
from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from lof_auth.services.tokens import TokenConfig
from lof_auth.services.tokens.durations import parse_duration


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("30s", 30),
        ("15m", 900),
        ("2h", 7200),
        ("7d", 604800),
        (" 15m ", 900),
    ],
)
def test_valid_durations(raw, expected):
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["bogus", "10w", "-5m", "15", "m", "", None, "1.5h", "15 m"])
def test_invalid_durations_fall_back(raw):
    assert parse_duration(raw) == 900
    assert parse_duration(raw, default=604800) == 604800


def test_invalid_duration_logs_setting_name(caplog):
    with caplog.at_level(logging.WARNING, logger="lof_auth.services.tokens.durations"):
        parse_duration("bogus", setting="JWT_ACCESS_EXPIRES_IN")
    assert "JWT_ACCESS_EXPIRES_IN" in caplog.text


@pytest.mark.parametrize("raw", ["0s", "0m", "00h", "0d"])
def test_zero_durations_fall_back(raw):
    assert parse_duration(raw) == 900
    assert parse_duration(raw, default=604800) == 604800


def test_zero_access_lifetime_keeps_default():
    cfg = TokenConfig.from_mapping({"JWT_ACCESS_EXPIRES_IN": "0m", "JWT_REFRESH_EXPIRES_IN": "0d"})

    assert cfg.access_expires == timedelta(minutes=15)
    assert cfg.refresh_expires == timedelta(days=7)
