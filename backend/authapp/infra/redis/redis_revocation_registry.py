# comments in English; reST docstrings
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import cast

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from authapp.services._shared.errors import StoreUnavailableError
from authapp.services._shared.ports import RevocationRegistry, token_digest

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RedisRevocationRegistry(RevocationRegistry):
    """
    Redis-backed registry of revoked **refresh tokens**.

    Entries are keyed by the SHA-256 digest of the token so raw tokens never
    reach the store, and expire after ``ttl`` (the refresh token lifetime).

    :param r: A Redis client (already connected).
    :param ttl: Lifetime of a revocation marker.
    """

    r: redis.Redis
    ttl: timedelta = timedelta(days=15)

    @staticmethod
    def _k(refresh_token: str) -> str:
        return f"revoked-token#{token_digest(refresh_token)}"

    def revoke(self, refresh_token: str) -> None:
        """Store a marker with TTL. Re-revoking only refreshes the TTL."""
        ttl = max(1, int(self.ttl.total_seconds()))
        try:
            self.r.set(self._k(refresh_token), "1", ex=ttl)
        except RedisError as exc:
            log.error("revocation.revoke_failed", exc_info=True)
            raise StoreUnavailableError("revocation registry") from exc

    def is_revoked(self, refresh_token: str) -> bool:
        """Return ``True`` when a marker exists; absence means not revoked."""
        try:
            return cast(int, self.r.exists(self._k(refresh_token))) == 1
        except RedisError as exc:
            # Connection errors and socket timeouts are both RedisError.
            log.error("revocation.check_failed", exc_info=True)
            raise StoreUnavailableError("revocation registry") from exc
