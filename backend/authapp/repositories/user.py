"""User repository for persistence and credential lookups."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from authapp.core.extensions import db
from authapp.models.user import User


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository:
    """Persistence-only access to :class:`User` rows.

    Never handles tokens or sessions; the session layer talks to it through
    :class:`~authapp.services.identity.service.IdentityService`.

    :param session: SQLAlchemy session; defaults to the Flask-scoped one.
    """

    def __init__(self, session: Session | None = None) -> None:
        self.session: Session = session if session is not None else db.session

    def add(self, user: User) -> User:
        """Stage ``user`` and flush so the primary key is assigned.

        :raises sqlalchemy.exc.IntegrityError: On a duplicate email.
        """
        self.session.add(user)
        self.session.flush()
        return user

    def get(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive)."""
        stmt = select(User).where(User.email == normalize_email(email))
        return self.session.execute(stmt).scalars().first()

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == normalize_email(email))
        return self.session.execute(stmt).first() is not None
