"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UserRegisterIn:
    """
    Input DTO for user registration.

    :param name: Display name.
    :type name: str
    :param email: Login email (normalized to lowercase).
    :type email: str
    :param password: Raw password to be hashed by the model; ``None`` for
        identity-provider accounts.
    :type password: str | None
    :param image: Optional avatar reference.
    :type image: str | None
    """

    name: str
    email: str
    password: str | None = None
    image: str | None = None


@dataclass(frozen=True, slots=True)
class UserAuthIn:
    """
    Input DTO for authentication.

    :param email: Login email.
    :type email: str
    :param password: Raw password, ``None`` when the identity provider
        already vouched for the email.
    :type password: str | None
    """

    email: str
    password: str | None = None
