# authapp/services/auth/dto.py
from __future__ import annotations

import enum
from dataclasses import dataclass

from authapp.services._shared.dto import Principal, TokenPair


class Provider(str, enum.Enum):
    """Sign-in methods accepted by the auth endpoints."""

    CREDENTIAL = "credential"
    GOOGLE = "oauth/google"


# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class SignUpIn:
    """
    Input DTO for sign-up.

    :param provider: Sign-in method.
    :type provider: Provider
    :param email: Login email; ignored for the Google provider.
    :type email: str | None
    :param name: Display name; ignored for the Google provider.
    :type name: str | None
    :param password: Raw password for credential accounts.
    :type password: str | None
    :param token: Identity provider bearer token.
    :type token: str | None
    """

    provider: Provider
    email: str | None = None
    name: str | None = None
    password: str | None = None
    token: str | None = None


@dataclass(frozen=True, slots=True)
class SignInIn:
    """
    Input DTO for sign-in.

    :param provider: Sign-in method.
    :type provider: Provider
    :param email: Login email for credential sign-in.
    :type email: str | None
    :param password: Raw password for credential sign-in.
    :type password: str | None
    :param token: Identity provider bearer token.
    :type token: str | None
    """

    provider: Provider
    email: str | None = None
    password: str | None = None
    token: str | None = None


# ---------------------------- Output DTOs --------------------------------- #


@dataclass(frozen=True, slots=True)
class SessionOut:
    """
    Result of a successful sign-up or sign-in.

    :param principal: Authenticated identity.
    :type principal: Principal
    :param tokens: Freshly issued token pair.
    :type tokens: TokenPair
    """

    principal: Principal
    tokens: TokenPair
