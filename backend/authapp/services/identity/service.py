"""
IdentityService
===============

Aggregate service responsible for the `User` aggregate:
- Registration with email uniqueness
- Credential verification (no token issuance)
- Principal lookup used by the session decision engine
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from authapp.models.user import User
from authapp.repositories.user import UserRepository
from authapp.services._shared.base import BaseService
from authapp.services._shared.dto import Principal
from authapp.services._shared.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    StoreUnavailableError,
)
from authapp.services._shared.ports import IdentityLookup
from authapp.services.identity.dto import UserAuthIn, UserRegisterIn

log = logging.getLogger(__name__)


def to_principal(user: User) -> Principal:
    return Principal(id=user.id, name=user.name, email=user.email, image=user.image)


class IdentityService(BaseService, IdentityLookup):
    """
    Application service for the `User` aggregate.

    Implements :class:`~authapp.services._shared.ports.IdentityLookup`.
    """

    # --------------------------------------------------------------------- #
    # Lookup
    # --------------------------------------------------------------------- #

    def find_by_id(self, user_id: int) -> Principal | None:
        """
        Resolve a user id to its current profile.

        :param user_id: User primary key.
        :returns: Principal or ``None`` when the user no longer exists.
        :raises StoreUnavailableError: When the database cannot answer.
        """
        try:
            with self.unit_of_work(read_only=True) as uow:
                user = uow.users.get(user_id)
                return to_principal(user) if user is not None else None
        except SQLAlchemyError as exc:
            log.error("identity.lookup_failed", exc_info=True)
            raise StoreUnavailableError("identity store") from exc

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register(self, dto: UserRegisterIn) -> Principal:
        """
        Register a new user.

        :param dto: User registration input DTO.
        :type dto: UserRegisterIn
        :returns: Principal for the created user.
        :rtype: Principal
        :raises ConflictError: When the email is already registered.
        """
        with self.unit_of_work() as uow:
            repo: UserRepository = uow.users

            if repo.exists_by_email(dto.email):
                raise ConflictError("User", f"This email {dto.email} already exists.")

            try:
                user = repo.add(
                    User(
                        name=dto.name,
                        email=dto.email,
                        password=dto.password,  # model hashes via setter
                        image=dto.image,
                    )
                )
            except IntegrityError as exc:
                # concurrent sign-up with the same email
                raise ConflictError("User", f"This email {dto.email} already exists.") from exc

            return to_principal(user)

    # --------------------------------------------------------------------- #
    # Authentication
    # --------------------------------------------------------------------- #

    def authenticate(self, dto: UserAuthIn) -> Principal:
        """
        Authenticate a user by email and, for credential accounts, password.

        :param dto: Authentication input DTO.
        :type dto: UserAuthIn
        :returns: Authenticated principal.
        :rtype: Principal
        :raises NotFoundError: When no user owns the email.
        :raises InvalidCredentialsError: When the password does not match or
            the account was created through the other sign-in method.
        """
        with self.unit_of_work(read_only=True) as uow:
            user = uow.users.get_by_email(dto.email)
            if user is None:
                raise NotFoundError("User", dto.email)

            if dto.password is None:
                # identity provider sign-in against a credential account
                if user.has_password:
                    raise InvalidCredentialsError()
            elif not user.verify_password(dto.password):
                raise InvalidCredentialsError()

            return to_principal(user)
