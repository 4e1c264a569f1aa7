"""Service layer public API.

Re-exports
----------
- Base primitives (from ``lof_auth.services._shared.base``)
    * :class:`BaseService`

- Auth service (from ``lof_auth.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`RegisterIn`, :class:`LoginIn`, :class:`RefreshIn`,
      :class:`LogoutIn`

- Token lifecycle (from ``lof_auth.services.tokens``)
    * :class:`TokenService`, :class:`TokenCleanupScheduler`
    * DTOs: :class:`TokenConfig`, :class:`TokenPairOut`
"""

from __future__ import annotations

from ._shared.base import BaseService
from .auth.dto import LoginIn, LogoutIn, RefreshIn, RegisterIn
from .auth.service import AuthService
from .tokens import TokenCleanupScheduler, TokenConfig, TokenPairOut, TokenService

__all__ = [
    # Base
    "BaseService",
    # Auth
    "AuthService",
    "RegisterIn",
    "LoginIn",
    "RefreshIn",
    "LogoutIn",
    # Tokens
    "TokenService",
    "TokenCleanupScheduler",
    "TokenConfig",
    "TokenPairOut",
]
