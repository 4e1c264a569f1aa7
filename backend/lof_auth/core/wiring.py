"""Explicit construction of the auth components for one Flask app."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import cast

from flask import Flask, current_app

from lof_auth.api.guard import RequestAuthGuard
from lof_auth.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from lof_auth.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from lof_auth.infra.sqlalchemy.sql_refresh_token_store import SQLRefreshTokenStore
from lof_auth.services._shared.ports import RefreshTokenStore, TokenProvider
from lof_auth.services.auth.service import AuthService
from lof_auth.services.tokens import (
    TokenCleanupScheduler,
    TokenConfig,
    TokenService,
    parse_duration,
)
from lof_auth.services.tokens.durations import DEFAULT_REFRESH_SECONDS

from .config import ConfigurationError
from .extensions import get_redis

log = logging.getLogger(__name__)

EXTENSION_KEY = "auth_services"


@dataclass(slots=True)
class AuthComponents:
    token_provider: TokenProvider
    refresh_store: RefreshTokenStore
    token_service: TokenService
    auth_service: AuthService
    guard: RequestAuthGuard
    scheduler: TokenCleanupScheduler


def build_refresh_store(app: Flask) -> RefreshTokenStore:
    """Pick the refresh store named by ``REFRESH_TOKEN_BACKEND``."""
    backend = str(app.config.get("REFRESH_TOKEN_BACKEND", "sql")).strip().lower()
    if backend == "sql":
        return SQLRefreshTokenStore()
    if backend == "redis":
        return RedisRefreshTokenStore(r=get_redis(app))
    raise ConfigurationError(f"Unknown REFRESH_TOKEN_BACKEND {backend!r}")


def init_app(app: Flask) -> AuthComponents:
    """Build every component once and store them under ``app.extensions``."""
    provider = JWTTokenProvider()
    store = build_refresh_store(app)
    token_service = TokenService(
        token_provider=provider,
        refresh_store=store,
        config=TokenConfig.from_mapping(app.config),
    )
    max_age = parse_duration(
        app.config.get("AUTH_MAX_TOKEN_AGE"),
        default=DEFAULT_REFRESH_SECONDS,
        setting="AUTH_MAX_TOKEN_AGE",
    )
    components = AuthComponents(
        token_provider=provider,
        refresh_store=store,
        token_service=token_service,
        auth_service=AuthService(token_service=token_service),
        guard=RequestAuthGuard(provider, max_age=timedelta(seconds=max_age)),
        scheduler=TokenCleanupScheduler(
            token_service,
            interval=app.config.get("TOKEN_CLEANUP_INTERVAL", 24 * 60 * 60),
            app=app,
        ),
    )
    app.extensions[EXTENSION_KEY] = components
    log.info("Auth components ready (refresh store: %s)", type(store).__name__)
    return components


def get_components() -> AuthComponents:
    """Return the components of the current app."""
    return cast(AuthComponents, current_app.extensions[EXTENSION_KEY])
