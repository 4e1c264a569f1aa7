"""
lof_auth.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) that define the contracts
for token signing and refresh-session persistence.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider`, the abstraction for token signing and
    verification, plus the deterministic :class:`~.StubTokenProvider`.

- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore` and :class:`~.RefreshTokenRecord`,
    plus the lock-protected :class:`~.InMemoryRefreshTokenStore`.

Design Notes
------------
Concrete adapters (flask-jwt-extended, SQLAlchemy, Redis) implement these
interfaces under ``lof_auth.infra``.
"""

from __future__ import annotations

from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshTokenRecord,
    RefreshTokenStore,
)
from .token_provider import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    StubTokenProvider,
    TokenProvider,
)

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "REFRESH_TOKEN_TYPE",
    "TokenProvider",
    "StubTokenProvider",
    "RefreshTokenStore",
    "RefreshTokenRecord",
    "InMemoryRefreshTokenStore",
]
