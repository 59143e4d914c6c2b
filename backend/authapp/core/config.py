"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

ONE_DAY: Final[int] = 24 * 60 * 60

# Loads .env during development (no-op when the file is missing)
load_dotenv()


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
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_seconds(name: str, default: int) -> timedelta:
    """Read a positive number of seconds from the environment as a ``timedelta``.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: int
        Seconds used when the variable is unset or blank.

    Returns
    -------
    datetime.timedelta
        Parsed duration.

    Raises
    ------
    ValueError
        If the value is not a positive integer.
    """
    raw = os.getenv(name)
    seconds = int(raw) if raw and raw.strip() else default
    if seconds <= 0:
        raise ValueError(f"{name} must be a positive number of seconds.")
    return timedelta(seconds=seconds)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Not used for tokens.
    JWT_SECRET_KEY: str | None
        Process-wide signing secret for access and refresh tokens. There is
        no default: :func:`authapp.factory.create_app` refuses to start
        without it.
    ACCESS_TOKEN_LIFETIME: timedelta
        Lifetime of access tokens (one day).
    REFRESH_TOKEN_LIFETIME: timedelta
        Lifetime of refresh tokens (15 days). Also used as revocation TTL and
        as the refresh cookie ``Max-Age``.
    REDIS_URL: str | None
        Location of the revocation registry.
    REDIS_SOCKET_TIMEOUT: float
        Per-call timeout in seconds for registry operations.
    REFRESH_COOKIE_NAME: str
        Name of the cookie carrying the refresh token.
    REFRESH_COOKIE_DOMAIN: str | None
        ``Domain`` attribute of the refresh cookie (host-only when ``None``).
    REFRESH_COOKIE_SECURE: bool
        Emit the ``Secure`` attribute on the refresh cookie.
    REFRESH_COOKIE_SAMESITE: str
        ``SameSite`` attribute of the refresh cookie.
    SESSION_EXEMPT_PREFIXES: tuple[str, ...]
        Request paths starting with one of these prefixes skip session checks.
    REVOKE_REFRESH_ON_ROTATION: bool
        Revoke the presented refresh token after a successful rotation.
    GOOGLE_USERINFO_URL: str
        Identity provider endpoint resolving a bearer token to a profile.
    GOOGLE_USERINFO_TIMEOUT: float
        Timeout in seconds for the identity provider call.
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

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    JWT_ALGORITHM = "HS256"

    # Token lifetimes
    ACCESS_TOKEN_LIFETIME = env_seconds("ACCESS_TOKEN_TTL_SECONDS", ONE_DAY)
    REFRESH_TOKEN_LIFETIME = env_seconds("REFRESH_TOKEN_TTL_SECONDS", 15 * ONE_DAY)

    # Revocation registry
    REDIS_URL = os.getenv("REDIS_URL")
    REDIS_SOCKET_TIMEOUT = float(os.getenv("REDIS_SOCKET_TIMEOUT", "0.5"))

    # Refresh cookie
    REFRESH_COOKIE_NAME = "refresh_token"
    REFRESH_COOKIE_DOMAIN = os.getenv("BACKEND_DOMAIN") or None
    REFRESH_COOKIE_SECURE = env_bool("REFRESH_COOKIE_SECURE", False)
    REFRESH_COOKIE_SAMESITE = "Strict"

    # Session decision engine
    SESSION_EXEMPT_PREFIXES: tuple[str, ...] = ("/api/v1/auth", "/api/v1/health")
    REVOKE_REFRESH_ON_ROTATION = env_bool("REVOKE_REFRESH_ON_ROTATION", False)

    # Identity provider
    GOOGLE_USERINFO_URL = os.getenv(
        "GOOGLE_USERINFO_URL", "https://www.googleapis.com/oauth2/v3/userinfo"
    )
    GOOGLE_USERINFO_TIMEOUT = float(os.getenv("GOOGLE_USERINFO_TIMEOUT", "5"))

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Without ``REDIS_URL`` the revocation registry falls back to an
    in-process store, which does not survive restarts.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Ships a fixed signing secret so token fixtures are reproducible.
    """

    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv("TEST_JWT_SECRET_KEY", "testing-signing-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    REDIS_URL = None
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug disabled and always marks the refresh cookie ``Secure``.
    ``REDIS_URL`` is mandatory here; see :mod:`authapp.core.extensions`.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    REFRESH_COOKIE_SECURE = True
    REQUIRE_REDIS = True


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
