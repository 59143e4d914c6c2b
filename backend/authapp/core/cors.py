"""Cross-origin policy for the browser client."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS


def parse_origins(raw: str | None) -> list[str]:
    return [o.strip() for o in (raw or "").split(",") if o.strip()]


def init_app(app: Flask) -> None:
    """Allow the configured front-end origins to call ``/api/*``.

    The refresh token travels as a cookie, so credentialed requests are only
    allowed for an explicit ``CORS_ORIGINS`` list; an empty value or ``"*"``
    opens the API to any origin without credentials.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    credentialed = bool(origins) and origins != ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": origins if credentialed else "*"}},
        supports_credentials=credentialed,
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
