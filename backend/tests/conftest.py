"""Pytest fixtures building an isolated application per test.

Every test gets its own app, which means a fresh in-memory SQLite database
and a fresh in-process revocation registry, so no state leaks between cases.
"""

from __future__ import annotations

import os
from datetime import timedelta

import pytest

from authapp.core.config import TestingConfig
from authapp.core.extensions import db as _db
from authapp.factory import create_app


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Avoids hitting external services (no Redis, Google stubbed).
    - Pins the token lifetimes used by expiry tests.
    """

    __test__ = False

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    REDIS_URL = None
    ACCESS_TOKEN_LIFETIME = timedelta(days=1)
    REFRESH_TOKEN_LIFETIME = timedelta(days=15)
    GOOGLE_USERINFO_URL = "https://idp.test/oauth2/v3/userinfo"
    USE_PROXYFIX = False
    CORS_ORIGINS = "http://localhost:5173"
    LOG_LEVEL = "WARNING"


@pytest.fixture()
def make_app():
    """Return a builder for apps with per-test config overrides."""
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)

    def _make(**overrides):
        config = type("OverrideConfig", (TestConfig,), overrides) if overrides else TestConfig
        return create_app(config, instance_relative_config=False)

    return _make


@pytest.fixture()
def app(make_app):
    """Flask application configured with :class:`TestConfig`."""
    return make_app()


@pytest.fixture()
def db(app):
    """Create the schema inside an application context.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    from tests.factories import SQLAlchemySession

    with app.app_context():
        _db.create_all()
        SQLAlchemySession.set(_db.session)
        try:
            yield _db
        finally:
            SQLAlchemySession.set(None)
            _db.session.remove()
            _db.drop_all()


@pytest.fixture()
def session(db):
    """Flask-SQLAlchemy scoped session used by the application code."""
    return db.session


@pytest.fixture()
def client(app, db):
    """Test client sharing the application context of :func:`db`."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk
