"""Flask extension instances and initialization helpers."""

from __future__ import annotations

import logging

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

log = logging.getLogger(__name__)

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Import-safe extension objects; state lives on the app they are bound to.
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()

REDIS_EXTENSION_KEY = "redis_client"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT, and the registry Redis client.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`authapp.models` package to ensure SQLAlchemy metadata is ready
        for migrations.

    Raises
    ------
    RuntimeError
        When Redis is configured but unreachable, or required but missing.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from authapp import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        if app.config.get("REQUIRE_REDIS"):
            raise RuntimeError("REDIS_URL must be configured for the revocation registry.")
        app.extensions.pop(REDIS_EXTENSION_KEY, None)
        log.warning("REDIS_URL not set; revocation registry is process-local.")
        return

    timeout = float(app.config.get("REDIS_SOCKET_TIMEOUT", 0.5))
    client = redis.Redis.from_url(
        redis_url,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions[REDIS_EXTENSION_KEY] = client


def get_redis(app: Flask) -> redis.Redis | None:
    """Return the Redis client bound to ``app`` (``None`` when not configured)."""
    return app.extensions.get(REDIS_EXTENSION_KEY)
