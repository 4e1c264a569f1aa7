"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from lof_auth.api.guard import AuthIdentity
from lof_auth.core.errors import Unauthorized

F = TypeVar("F", bound=Callable[..., Any])


def require_auth(func: F) -> F:
    """Ensure the request carries a valid bearer access token.

    The verified identity is stored on ``g.identity``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        from lof_auth.core.wiring import get_components

        guard = get_components().guard
        g.identity = guard.authenticate(request.headers.get("Authorization"))
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_identity() -> AuthIdentity:
    """Return the identity attached by :func:`require_auth`."""

    identity = g.get("identity")
    if identity is None:
        raise Unauthorized("Invalid or expired token")
    return cast(AuthIdentity, identity)


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
