"""HTTP surface: versioned blueprints plus the session boundary."""

from __future__ import annotations

from flask import Flask


def init_app(app: Flask) -> None:
    """Mount every v1 blueprint under ``API_BASE_PREFIX/v1`` and install the
    session hooks.

    ``SESSION_EXEMPT_PREFIXES`` must match the mounted URLs.
    """

    from authapp.api import session
    from authapp.api.v1 import API_VERSION, REGISTRY

    base = "/" + "/".join(
        part.strip("/") for part in (app.config.get("API_BASE_PREFIX", "/api"), API_VERSION)
    )
    for bp, rel_prefix in REGISTRY:
        app.register_blueprint(bp, url_prefix=base + rel_prefix)

    session.init_app(app)


__all__ = ["init_app"]
