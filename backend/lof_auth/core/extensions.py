"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

from lof_auth.core.config import ConfigurationError

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Extension objects are import-safe; the services themselves are built per app
# in ``lof_auth.core.wiring``.
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()


def _configure_jwt(app: Flask) -> None:
    """Project the app's issuer/audience settings onto flask-jwt-extended keys."""
    cfg = app.config
    cfg.setdefault("JWT_ENCODE_ISSUER", cfg.get("JWT_ISSUER"))
    cfg.setdefault("JWT_DECODE_ISSUER", cfg.get("JWT_ISSUER"))
    cfg.setdefault("JWT_ENCODE_AUDIENCE", cfg.get("JWT_AUDIENCE"))
    cfg.setdefault("JWT_DECODE_AUDIENCE", cfg.get("JWT_AUDIENCE"))
    cfg.setdefault("JWT_TOKEN_LOCATION", ["headers"])
    cfg.setdefault("JWT_IDENTITY_CLAIM", "sub")


def _connect_redis(url: str) -> redis.Redis:
    client = redis.Redis.from_url(url)
    try:
        client.ping()
    except RedisError as exc:
        raise ConfigurationError(f"Failed to connect to Redis at {url!r}") from exc
    return client


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT and (optionally) Redis.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`lof_auth.models` package to ensure SQLAlchemy metadata is ready
        for migrations.

    Notes
    -----
    The Redis client is opened only when ``REDIS_URL`` is set and is kept in
    ``app.extensions["redis_client"]``.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from lof_auth import models as _models  # noqa: F401

    migrate.init_app(app, db)

    _configure_jwt(app)
    jwt.init_app(app)

    redis_url = app.config.get("REDIS_URL")
    if redis_url:
        app.extensions["redis_client"] = _connect_redis(redis_url)
    else:
        app.extensions.pop("redis_client", None)


def get_redis(app: Flask | None = None) -> redis.Redis:
    """Return the Redis client bound to ``app`` (defaults to ``current_app``).

    :raises ConfigurationError: If the app was started without ``REDIS_URL``.
    """
    target = app if app is not None else current_app
    client = target.extensions.get("redis_client")
    if client is None:
        raise ConfigurationError("Redis is not configured; set REDIS_URL")
    return client
