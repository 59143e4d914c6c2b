"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from authapp.core.config import BaseConfig, get_config
from authapp.core.logger import configure_logging
from authapp.core.logger import init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    Raises
    ------
    RuntimeError
        When no token signing secret is configured. Requests are never
        served without one.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    secret = app.config.get("JWT_SECRET_KEY")
    if not isinstance(secret, str) or not secret.strip():
        raise RuntimeError("JWT_SECRET_KEY must be set to a non-empty signing secret.")

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Proxy headers if running behind a reverse proxy (optional module)
    from authapp.core import proxy

    proxy.init_app(app)

    from authapp.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from authapp.core import cors

    cors.init_app(app)

    from authapp.api import init_app as init_api

    init_api(app)

    from authapp.core import errors

    errors.init_app(app)

    from authapp import cli as app_cli

    app_cli.init_app(app)

    return app
