"""Application settings with environment-based simple classes."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Recommended minimum length for the HMAC signing secret
MIN_SECRET_LENGTH: Final[int] = 32

log = logging.getLogger(__name__)

# Load .env during development (no-op when the file is absent)
load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised at startup when mandatory settings are missing or unusable."""


_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "y", "on"})


def parse_bool(value: str | None, default: bool = False) -> bool:
    """Interpret a textual flag (env var, query string) as a boolean."""
    if value is None:
        return default
    return str(value).strip().lower() in _TRUTHY


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    return parse_bool(os.getenv(name), default)


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back on garbage."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError:
        log.warning("Invalid integer for %s=%r; using %s", name, val, default)
        return default


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET_KEY: str | None
        Key used by ``flask-jwt-extended`` to sign access and refresh tokens.
        Mandatory: the factory refuses to start without it.
    JWT_ACCESS_EXPIRES_IN: str
        Access token lifetime as a duration string (``"15m"``).
    JWT_REFRESH_EXPIRES_IN: str
        Refresh token lifetime as a duration string (``"7d"``).
    JWT_ISSUER / JWT_AUDIENCE: str
        ``iss``/``aud`` claims stamped on every token and enforced on decode.
    JWT_DECODE_LEEWAY: int
        Clock-skew tolerance in seconds applied when verifying ``exp``.
    AUTH_MAX_TOKEN_AGE: str
        Absolute age ceiling enforced by the request guard, independent of ``exp``.
    REFRESH_TOKEN_BACKEND: str
        ``"sql"`` (default) or ``"redis"``.
    TOKEN_CLEANUP_ENABLED / TOKEN_CLEANUP_INTERVAL:
        Toggle and period (seconds) of the expired refresh-token sweep.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    JWT_ALGORITHM = "HS256"

    # Token lifecycle
    JWT_ACCESS_EXPIRES_IN = os.getenv("JWT_ACCESS_EXPIRES_IN", "15m")
    JWT_REFRESH_EXPIRES_IN = os.getenv("JWT_REFRESH_EXPIRES_IN", "7d")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "lots-of-fun-app")
    JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "lots-of-fun-users")
    JWT_DECODE_LEEWAY = env_int("JWT_CLOCK_TOLERANCE", 30)
    AUTH_MAX_TOKEN_AGE = os.getenv("AUTH_MAX_TOKEN_AGE", "7d")

    # Refresh token persistence
    REFRESH_TOKEN_BACKEND = os.getenv("REFRESH_TOKEN_BACKEND", "sql")
    REDIS_URL = os.getenv("REDIS_URL")

    # Expired refresh token sweep
    TOKEN_CLEANUP_ENABLED = env_bool("TOKEN_CLEANUP_ENABLED", True)
    TOKEN_CLEANUP_INTERVAL = env_int("TOKEN_CLEANUP_INTERVAL", 24 * 60 * 60)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000")

    # Reverse proxy
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXYFIX_HOPS = env_int("PROXYFIX_HOPS", 1)

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Ships a fixed signing secret so tests never depend on the environment.
    - Disables the background cleanup thread; tests call the sweep directly.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    JWT_SECRET_KEY = "testing-secret-key-that-is-long-enough-0123456789"
    REFRESH_TOKEN_BACKEND = "sql"
    TOKEN_CLEANUP_ENABLED = False
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def validate_jwt_config(config: Mapping[str, Any]) -> None:
    """Fail fast when the token signing configuration is unusable.

    :param config: Loaded Flask config mapping.
    :raises ConfigurationError: If ``JWT_SECRET_KEY`` is missing or blank.
    """
    secret = config.get("JWT_SECRET_KEY")
    if not secret or not str(secret).strip():
        log.error("JWT_SECRET_KEY is not configured")
        raise ConfigurationError("JWT_SECRET_KEY must be configured")

    if len(str(secret)) < MIN_SECRET_LENGTH:
        log.warning(
            "JWT_SECRET_KEY is too short; recommended minimum length is %s characters",
            MIN_SECRET_LENGTH,
        )

    if not config.get("JWT_ACCESS_EXPIRES_IN"):
        log.warning("JWT_ACCESS_EXPIRES_IN is not configured, using default")

    log.info("JWT configuration validated successfully")
