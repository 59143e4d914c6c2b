"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from authapp.api.deps import json_response, timing
from authapp.core.extensions import db, get_redis

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application, database and revocation registry health."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"

    client = get_redis(current_app)
    registry_status = "memory"
    if client is not None:
        try:
            client.ping()
            registry_status = "ok"
        except RedisError:  # pragma: no cover - depends on Redis
            current_app.logger.exception("healthcheck.registry_error")
            registry_status = "fail"

    version = current_app.config.get("APP_VERSION", "dev")
    payload = {
        "status": "ok",
        "db": db_status,
        "registry": registry_status,
        "version": version,
    }
    return json_response(payload)
