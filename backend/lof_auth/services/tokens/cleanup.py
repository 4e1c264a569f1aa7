# lof_auth/services/tokens/cleanup.py
from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flask import Flask

    from .service import TokenService

log = logging.getLogger(__name__)

DAILY = 24 * 60 * 60


class TokenCleanupScheduler:
    """
    Periodically purge expired refresh tokens on a background thread.

    The worker sleeps on an :class:`threading.Event` so :meth:`stop` wakes it
    immediately. A failing sweep is logged and the next one still runs.

    :param token_service: Service whose :meth:`purge_expired` is called.
    :param interval: Seconds between sweeps.
    :param app: Flask app whose context wraps each sweep (needed by the
        relational store).
    """

    def __init__(
        self,
        token_service: TokenService,
        *,
        interval: float = DAILY,
        app: Flask | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("Cleanup interval must be positive.")
        self._service = token_service
        self._interval = interval
        self._app = app
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self._stop.clear()
            self._thread = threading.Thread(
                target=self._loop, name="token-cleanup", daemon=True
            )
            self._thread.start()
        log.info("Token cleanup scheduler started (every %ss)", self._interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        with self._lock:
            thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def _loop(self) -> None:
        while not self._stop.wait(timeout=self._interval):
            self.run_once()

    def run_once(self) -> int | None:
        """
        Run one sweep now.

        :returns: Number of purged records, or ``None`` when the sweep failed.
        """
        log.info("Running expired refresh token cleanup")
        try:
            if self._app is not None:
                with self._app.app_context():
                    removed = self._service.purge_expired()
            else:
                removed = self._service.purge_expired()
        except Exception:
            log.exception("Expired refresh token cleanup failed")
            return None
        log.info("Expired refresh token cleanup finished", extra={"removed": removed})
        return removed
