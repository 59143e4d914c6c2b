"""
Session boundary between HTTP and the session decision engine.

Wires the engine from configuration at startup, runs it before every
non-exempt request and turns its :class:`SessionDecision` into HTTP effects:

* rejection: :class:`~authapp.core.errors.SessionRejected` (401);
* acceptance: the principal is attached to ``flask.g``;
* rotation: the new refresh token is set as a cookie and ``accessToken`` is
  merged into the JSON body produced by the handler.
"""

from __future__ import annotations

import logging
from typing import Any, cast

from flask import Flask, Response, current_app, g, request

from authapp.core.errors import SessionRejected
from authapp.core.extensions import get_redis
from authapp.infra.google.userinfo_client import GoogleUserInfoClient
from authapp.infra.jwt.flask_jwt_token_codec import JWTTokenCodec
from authapp.infra.redis.redis_revocation_registry import RedisRevocationRegistry
from authapp.services._shared.dto import TokenPair
from authapp.services._shared.ports import InMemoryRevocationRegistry, RevocationRegistry
from authapp.services.auth.service import AuthService
from authapp.services.identity.service import IdentityService
from authapp.services.session import SessionDecisionEngine, SessionIssuer

log = logging.getLogger(__name__)

ENGINE_EXTENSION_KEY = "session_engine"
AUTH_EXTENSION_KEY = "auth_service"
REGISTRY_EXTENSION_KEY = "revocation_registry"

ACCESS_TOKEN_FIELD = "accessToken"


# --------------------------------------------------------------------------- #
# Accessors
# --------------------------------------------------------------------------- #


def get_engine(app: Flask | None = None) -> SessionDecisionEngine:
    app = app or current_app
    return cast(SessionDecisionEngine, app.extensions[ENGINE_EXTENSION_KEY])


def get_auth_service(app: Flask | None = None) -> AuthService:
    app = app or current_app
    return cast(AuthService, app.extensions[AUTH_EXTENSION_KEY])


def get_registry(app: Flask | None = None) -> RevocationRegistry:
    app = app or current_app
    return cast(RevocationRegistry, app.extensions[REGISTRY_EXTENSION_KEY])


# --------------------------------------------------------------------------- #
# Request parsing
# --------------------------------------------------------------------------- #


def bearer_token() -> str | None:
    """Return the token of an ``Authorization: Bearer`` header, if any."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def refresh_cookie() -> str | None:
    name = current_app.config.get("REFRESH_COOKIE_NAME", "refresh_token")
    return request.cookies.get(name) or None


def is_exempt(path: str, prefixes: tuple[str, ...]) -> bool:
    """``True`` when ``path`` equals a prefix or continues it with ``/``."""
    for prefix in prefixes:
        prefix = prefix.rstrip("/")
        if path == prefix or path.startswith(prefix + "/"):
            return True
    return False


# --------------------------------------------------------------------------- #
# Response mutation
# --------------------------------------------------------------------------- #


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    """Attach ``refresh_token`` as the HttpOnly refresh cookie."""
    cfg = current_app.config
    response.set_cookie(
        cfg.get("REFRESH_COOKIE_NAME", "refresh_token"),
        refresh_token,
        max_age=int(cfg["REFRESH_TOKEN_LIFETIME"].total_seconds()),
        path="/",
        domain=cfg.get("REFRESH_COOKIE_DOMAIN"),
        secure=bool(cfg.get("REFRESH_COOKIE_SECURE")),
        httponly=True,
        samesite=cfg.get("REFRESH_COOKIE_SAMESITE", "Strict"),
    )


def clear_refresh_cookie(response: Response) -> None:
    cfg = current_app.config
    response.delete_cookie(
        cfg.get("REFRESH_COOKIE_NAME", "refresh_token"),
        path="/",
        domain=cfg.get("REFRESH_COOKIE_DOMAIN"),
        secure=bool(cfg.get("REFRESH_COOKIE_SECURE")),
        httponly=True,
        samesite=cfg.get("REFRESH_COOKIE_SAMESITE", "Strict"),
    )


def merge_access_token(response: Response, access_token: str) -> None:
    """Add ``accessToken`` to a JSON object body unless the handler set one."""
    if not response.is_json or response.direct_passthrough:
        return
    body: Any = response.get_json(silent=True)
    if not isinstance(body, dict) or ACCESS_TOKEN_FIELD in body:
        return
    body[ACCESS_TOKEN_FIELD] = access_token
    response.set_data(current_app.json.dumps(body))


# --------------------------------------------------------------------------- #
# Wiring
# --------------------------------------------------------------------------- #


def _build_registry(app: Flask) -> RevocationRegistry:
    ttl = app.config["REFRESH_TOKEN_LIFETIME"]
    client = get_redis(app)
    if client is None:
        log.info("session.registry", extra={"reason": "in-memory"})
        return InMemoryRevocationRegistry(ttl=ttl)
    return RedisRevocationRegistry(client, ttl=ttl)


def init_app(app: Flask) -> None:
    """Build the session services and install the request hooks."""

    codec = JWTTokenCodec()
    registry = _build_registry(app)
    identities = IdentityService()
    issuer = SessionIssuer(
        codec,
        access_lifetime=app.config["ACCESS_TOKEN_LIFETIME"],
        refresh_lifetime=app.config["REFRESH_TOKEN_LIFETIME"],
    )

    app.extensions[REGISTRY_EXTENSION_KEY] = registry
    app.extensions[ENGINE_EXTENSION_KEY] = SessionDecisionEngine(
        codec=codec,
        registry=registry,
        identities=identities,
        issuer=issuer,
        revoke_on_rotation=bool(app.config.get("REVOKE_REFRESH_ON_ROTATION")),
    )
    app.extensions[AUTH_EXTENSION_KEY] = AuthService(
        identities=identities,
        issuer=issuer,
        registry=registry,
        identity_provider=GoogleUserInfoClient(
            url=app.config["GOOGLE_USERINFO_URL"],
            timeout=float(app.config.get("GOOGLE_USERINFO_TIMEOUT", 5.0)),
        ),
    )

    exempt = tuple(app.config.get("SESSION_EXEMPT_PREFIXES", ()))

    @app.before_request
    def _check_session() -> None:
        # the app context (and so ``g``) can outlive a single request in tests
        g.principal = None
        g.renewed_session = None

        if request.method == "OPTIONS" or is_exempt(request.path, exempt):
            return

        decision = get_engine().decide(bearer_token(), refresh_cookie())
        rejection = decision.rejection
        if rejection is not None:
            raise SessionRejected(rejection.code, rejection.message)

        g.principal = decision.principal
        g.renewed_session = decision.renewed

    @app.after_request
    def _attach_renewed_session(response: Response) -> Response:
        renewed: TokenPair | None = g.get("renewed_session")
        if renewed is None:
            return response
        set_refresh_cookie(response, renewed.refresh_token)
        merge_access_token(response, renewed.access_token)
        return response
