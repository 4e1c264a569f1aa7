"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

import atexit
import logging

from flask import Flask

from lof_auth.core.config import BaseConfig, get_config, validate_jwt_config
from lof_auth.core.logger import configure_logging, init_app as init_logging

log = logging.getLogger(__name__)


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :raises ConfigurationError: When ``JWT_SECRET_KEY`` is missing.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Refuse to start without a signing secret
    validate_jwt_config(app.config)

    from lof_auth.core import proxy

    proxy.init_app(app)

    from lof_auth.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from lof_auth.core import cors

    cors.init_app(app)

    from lof_auth.core import wiring

    components = wiring.init_app(app)

    from lof_auth.api import init_app as init_api

    init_api(app)

    from lof_auth.core import errors

    errors.init_app(app)

    from lof_auth import cli as app_cli

    app_cli.init_app(app)

    if app.config.get("TOKEN_CLEANUP_ENABLED"):
        components.scheduler.start()
        atexit.register(components.scheduler.stop)

    return app
