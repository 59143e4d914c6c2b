"""Factory Boy base bound to the application's SQLAlchemy session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Holder for the session the ``db`` fixture hands to factories."""

    _session = None

    @classmethod
    def set(cls, session) -> None:
        cls._session = session

    @classmethod
    def get(cls):
        if cls._session is None:
            raise RuntimeError("No factory session; request the 'db' fixture first.")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        # Session checks roll back their read-only unit of work, so rows must
        # be committed to stay visible across requests.
        sqlalchemy_session_persistence = "commit"
