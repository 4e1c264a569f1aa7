# tests/unit/services/test_cleanup_scheduler.py
from __future__ import annotations

import threading
from datetime import timedelta

import pytest

from lof_auth.services._shared.ports import InMemoryRefreshTokenStore, StubTokenProvider
from lof_auth.services.tokens import TokenCleanupScheduler, TokenService
from tests.helpers.utils import not_raises


class RecordingService:
    """Stand-in for TokenService counting sweeps."""

    def __init__(self, *, fail: bool = False) -> None:
        self.calls = 0
        self.fail = fail
        self.swept = threading.Event()

    def purge_expired(self) -> int:
        self.calls += 1
        self.swept.set()
        if self.fail:
            raise RuntimeError("db unavailable")
        return 4


def test_run_once_purges_expired(clock):
    store = InMemoryRefreshTokenStore()
    service = TokenService(
        token_provider=StubTokenProvider(clock=clock), refresh_store=store, clock=clock
    )
    service.issue(1, "neo")
    clock.advance(days=8)

    assert TokenCleanupScheduler(service).run_once() == 1
    assert store.list_user_records(1) == []


def test_run_once_logs_and_swallows_failures(caplog):
    scheduler = TokenCleanupScheduler(RecordingService(fail=True))

    with not_raises(RuntimeError):
        assert scheduler.run_once() is None
    assert "cleanup failed" in caplog.text


def test_run_once_uses_app_context(app):
    seen = {}

    class _Service:
        def purge_expired(self):
            from flask import current_app

            seen["app"] = current_app._get_current_object()
            return 0

    TokenCleanupScheduler(_Service(), app=app).run_once()
    assert seen["app"] is app


def test_background_thread_sweeps_and_stops():
    service = RecordingService()
    scheduler = TokenCleanupScheduler(service, interval=0.01)

    scheduler.start()
    scheduler.start()  # idempotent
    try:
        assert service.swept.wait(timeout=2)
        assert scheduler.running
    finally:
        scheduler.stop(timeout=2)

    assert not scheduler.running
    assert service.calls >= 1


def test_failures_do_not_kill_the_loop():
    service = RecordingService(fail=True)
    scheduler = TokenCleanupScheduler(service, interval=0.01)

    scheduler.start()
    try:
        assert service.swept.wait(timeout=2)
        service.swept.clear()
        assert service.swept.wait(timeout=2)
    finally:
        scheduler.stop(timeout=2)
    assert service.calls >= 2


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        TokenCleanupScheduler(RecordingService(), interval=0)


def test_default_interval_is_daily():
    scheduler = TokenCleanupScheduler(RecordingService())
    assert scheduler._interval == timedelta(days=1).total_seconds()
