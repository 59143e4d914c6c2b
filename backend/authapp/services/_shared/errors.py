"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask, HTTP, or SQLAlchemy directly. They serve as stable contracts between
repositories, stores, and application services.

The translation to HTTP responses (RFC 7807) is handled by
``authapp/core/errors.py``.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them to ``APIError`` instances.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"No {self.entity.lower()} is associated with: {self.key}."


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class InvalidCredentialsError(ServiceError):
    """Raised when an email/password (or provider) pair does not match."""

    def __init__(self, message: str = "Email and password mismatch.") -> None:
        super().__init__(message)


class IdentityProviderError(ServiceError):
    """Raised when the third-party identity provider rejects a token."""

    def __init__(self, message: str = "Invalid token.") -> None:
        super().__init__(message)


class StoreUnavailableError(ServiceError):
    """
    Raised when a backing store (revocation registry, identity database)
    cannot answer.

    Session checks treat it as a rejection (fail closed).

    :param store: Short store name used in logs.
    """

    def __init__(self, store: str) -> None:
        super().__init__(f"{store} unavailable")
        self.store = store
