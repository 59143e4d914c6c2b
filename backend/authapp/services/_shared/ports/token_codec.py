from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Protocol


class TokenKind(str, Enum):
    """Token families issued by the codec (stored in the ``type`` claim)."""

    ACCESS = "access"
    REFRESH = "refresh"


class VerificationError(Enum):
    """Why a token failed verification. Callers reject all of them alike."""

    MALFORMED = "malformed"
    SIGNATURE_MISMATCH = "signature_mismatch"
    EXPIRED = "expired"


@dataclass(frozen=True, slots=True)
class Verification:
    """
    Typed outcome of :meth:`TokenCodec.verify`.

    Exactly one of ``payload`` / ``error`` is set.
    """

    payload: Mapping[str, Any] | None = None
    error: VerificationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: VerificationError) -> Verification:
        return cls(error=error)


class TokenCodec(Protocol):
    """
    Port for signing and verifying session tokens.

    ``issue`` payloads must carry an ``id`` entry (the token subject) and
    must not reuse JWT registered claim names (``sub``, ``exp``, ``type``,
    ...); either violation raises :class:`ValueError`. Any such payload
    verifies back to an equal mapping until ``lifetime`` elapses.
    ``verify`` never raises; failures come back as a :class:`Verification`
    with ``error`` set.
    """

    def issue(
        self,
        payload: Mapping[str, Any],
        lifetime: timedelta,
        *,
        kind: TokenKind = TokenKind.ACCESS,
    ) -> str: ...

    def verify(self, token: str, *, kind: TokenKind | None = None) -> Verification: ...
