"""JSON logging with request correlation and token redaction.

Every record emitted while a request is active carries the request id and,
once :func:`lof_auth.api.deps.require_auth` has run, the authenticated user
id. Anything shaped like a signed JWT is masked before it reaches a handler.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = ("X-Request-ID", "X-Correlation-ID")
MAX_REQUEST_ID_LENGTH = 128

# ``extra=`` keys copied into the JSON payload when present
EXTRA_KEYS = ("endpoint", "elapsed_ms", "user_id", "jti", "removed")

NOISY_LOGGERS = ("werkzeug", "urllib3")

_JWT_RE = re.compile(r"eyJ[\w-]+\.[\w-]+\.[\w-]+")
REDACTED = "[redacted-jwt]"


def redact_tokens(text: str) -> str:
    """Mask compact JWS strings so credentials never land in log sinks."""
    return _JWT_RE.sub(REDACTED, text)


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, UTC).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "name": record.name,
            "message": redact_tokens(record.getMessage()),
            "request_id": getattr(record, "request_id", None),
        }
        for key in EXTRA_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = redact_tokens(self.formatException(record.exc_info))
        return json.dumps(payload, default=str)


class RequestContextFilter(logging.Filter):
    """Stamp ``request_id`` and, when authenticated, ``user_id`` on records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not has_request_context():
            record.request_id = None
            return True
        record.request_id = ensure_request_id()
        identity = g.get("identity")
        if identity is not None and getattr(record, "user_id", None) is None:
            record.user_id = identity.user_id
        return True


def _accept_request_id(value: str | None) -> str | None:
    if not value:
        return None
    value = value.strip()
    if not value or len(value) > MAX_REQUEST_ID_LENGTH or not value.isprintable():
        return None
    return value


def ensure_request_id() -> str:
    """Return the current request identifier, generating one when necessary.

    Client supplied ids are reused only when short and printable.
    """
    if not has_request_context():
        return str(uuid4())
    if "request_id" in g:
        return g.request_id  # type: ignore[return-value]
    request_id = None
    for header in CORRELATION_HEADERS:
        request_id = _accept_request_id(request.headers.get(header))
        if request_id:
            break
    g.request_id = request_id or str(uuid4())
    return g.request_id  # type: ignore[return-value]


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single JSON stdout handler on the root logger."""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestContextFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    root.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def init_app(app: Flask) -> None:
    """Seed the request id early and echo it on every response."""

    app.logger.addFilter(RequestContextFilter())

    @app.before_request
    def _seed_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def _inject_response_header(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["configure_logging", "ensure_request_id", "init_app", "redact_tokens"]
