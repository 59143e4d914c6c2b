from __future__ import annotations

import hashlib
import threading
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Protocol


def token_digest(token: str) -> str:
    """Return the SHA-256 hex digest used to address a token in stores and logs."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def token_fingerprint(token: str) -> str:
    """Short, non-reversible token marker that is safe to log."""
    return token_digest(token)[:12]


class RevocationRegistry(Protocol):
    """
    Store of refresh tokens invalidated before their natural expiry.

    ``revoke`` is idempotent. Both methods raise
    :class:`~authapp.services._shared.errors.StoreUnavailableError` when the
    store cannot answer; callers must then fail closed.
    """

    def revoke(self, refresh_token: str) -> None: ...

    def is_revoked(self, refresh_token: str) -> bool: ...


class InMemoryRevocationRegistry(RevocationRegistry):
    """Process-local registry for tests and Redis-less development."""

    def __init__(
        self,
        ttl: timedelta = timedelta(days=15),
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._revoked: dict[str, float] = {}
        self._lock = threading.Lock()

    def revoke(self, refresh_token: str) -> None:
        with self._lock:
            now = self._clock()
            self._sweep(now)
            self._revoked[token_digest(refresh_token)] = now + self.ttl.total_seconds()

    def is_revoked(self, refresh_token: str) -> bool:
        key = token_digest(refresh_token)
        with self._lock:
            expires_at = self._revoked.get(key)
            if expires_at is None:
                return False
            if expires_at <= self._clock():
                # entry outlived the token it blocks
                del self._revoked[key]
                return False
            return True

    def size(self) -> int:
        """Number of live and not yet swept markers."""
        with self._lock:
            return len(self._revoked)

    def _sweep(self, now: float) -> None:
        # caller holds the lock
        expired = [key for key, expires_at in self._revoked.items() if expires_at <= now]
        for key in expired:
            del self._revoked[key]
