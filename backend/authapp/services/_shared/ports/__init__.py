"""
authapp.services._shared.ports
==============================

Collection of *ports* (hexagonal interfaces) that define the contracts
the session layer depends on.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec`: signing and verification of access and
    refresh tokens, with the typed :class:`~.Verification` outcome.

- :mod:`revocation_registry`:
    Defines :class:`~.RevocationRegistry`: explicitly invalidated refresh
    tokens, plus an in-memory implementation.

- :mod:`identity_lookup`:
    Defines :class:`~.IdentityLookup`: user id to principal resolution.

- :mod:`identity_provider`:
    Defines :class:`~.IdentityProvider`: third-party token to profile
    exchange used by sign-up and sign-in.

Design Notes
------------
Concrete adapters (Flask-JWT-Extended, Redis, SQLAlchemy) live under
``authapp.infra`` and ``authapp.services.identity`` and are injected into the
session decision engine at startup.
"""

from __future__ import annotations

from .identity_lookup import IdentityLookup
from .identity_provider import IdentityProvider, ProviderProfile
from .revocation_registry import (
    InMemoryRevocationRegistry,
    RevocationRegistry,
    token_digest,
    token_fingerprint,
)
from .token_codec import TokenCodec, TokenKind, Verification, VerificationError

__all__ = [
    "IdentityLookup",
    "IdentityProvider",
    "InMemoryRevocationRegistry",
    "ProviderProfile",
    "RevocationRegistry",
    "TokenCodec",
    "TokenKind",
    "Verification",
    "VerificationError",
    "token_digest",
    "token_fingerprint",
]
