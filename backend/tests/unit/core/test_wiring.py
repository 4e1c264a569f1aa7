# tests/unit/core/test_wiring.py
from __future__ import annotations

import fakeredis
import pytest
from flask import Flask

from lof_auth.core.config import ConfigurationError
from lof_auth.core.wiring import build_refresh_store, get_components
from lof_auth.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from lof_auth.infra.sqlalchemy.sql_refresh_token_store import SQLRefreshTokenStore


def _bare_app(**config) -> Flask:
    app = Flask(__name__)
    app.config.update(config)
    return app


def test_sql_backend_is_default():
    assert isinstance(build_refresh_store(_bare_app()), SQLRefreshTokenStore)


def test_redis_backend_uses_app_client():
    app = _bare_app(REFRESH_TOKEN_BACKEND="Redis")
    app.extensions["redis_client"] = fakeredis.FakeRedis()

    assert isinstance(build_refresh_store(app), RedisRefreshTokenStore)


def test_redis_backend_without_url_fails_fast():
    with pytest.raises(ConfigurationError):
        build_refresh_store(_bare_app(REFRESH_TOKEN_BACKEND="redis"))


def test_unknown_backend_rejected():
    with pytest.raises(ConfigurationError):
        build_refresh_store(_bare_app(REFRESH_TOKEN_BACKEND="mongo"))


def test_components_registered_on_app(app):
    with app.app_context():
        components = get_components()

    assert components is app.extensions["auth_services"]
    assert components.auth_service.tokens is components.token_service
    assert not components.scheduler.running
