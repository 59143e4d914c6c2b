"""Transactional scopes over the Flask-SQLAlchemy session."""

from __future__ import annotations

from sqlalchemy.orm import Session

from authapp.core.extensions import db
from authapp.repositories.user import UserRepository


class SQLAlchemyUnitOfWork:
    """
    One use-case transaction with the repositories bound to it.

    Commits when the block exits cleanly and rolls back when it raises.

    :param session: Session to use; defaults to the Flask-scoped one.
    """

    read_only = False

    def __init__(self, session: Session | None = None) -> None:
        self.session: Session = session if session is not None else db.session
        self.users = UserRepository(self.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None or self.read_only:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        if self.read_only:
            raise RuntimeError("Read-only unit of work cannot commit.")
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyUnitOfWork):
    """Unit of work that always rolls back; lookups never persist anything."""

    read_only = True
