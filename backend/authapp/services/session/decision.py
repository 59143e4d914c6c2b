"""
Session decision engine.

Every protected request presents up to two credentials: the access token
(``Authorization: Bearer``) and the refresh token (cookie). The engine maps
that pair to a :class:`SessionDecision`:

================  ===============  ==========================================
access            refresh          outcome
================  ===============  ==========================================
absent            absent           reject ``unauthenticated``
absent            present          refresh flow
present           absent           reject ``unauthenticated``
present           present          accept if the access token verifies,
                                   otherwise refresh flow
================  ===============  ==========================================

The refresh flow verifies the refresh token, checks the revocation registry,
re-reads the user and rotates both tokens. Store failures reject with
``unavailable`` (fail closed). The engine never touches HTTP objects; the
boundary in :mod:`authapp.api.session` interprets the result.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from authapp.services._shared.dto import Principal, TokenPair, coerce_user_id
from authapp.services._shared.errors import StoreUnavailableError
from authapp.services._shared.ports import (
    IdentityLookup,
    RevocationRegistry,
    TokenCodec,
    TokenKind,
    token_fingerprint,
)
from authapp.services.session.issuance import SessionIssuer

log = logging.getLogger(__name__)


class Rejection(enum.Enum):
    """Reasons a request is refused; all surface as HTTP 401."""

    UNAUTHENTICATED = "unauthenticated"
    SESSION_EXPIRED = "session_expired"
    UNAVAILABLE = "unavailable"
    MALFORMED = "malformed"

    @property
    def code(self) -> str:
        return self.value

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    Rejection.UNAUTHENTICATED: "Please sign in to continue.",
    Rejection.SESSION_EXPIRED: "Please sign in again.",
    Rejection.UNAVAILABLE: "Session could not be verified. Please try again later.",
    Rejection.MALFORMED: "Session credentials are malformed. Please sign in again.",
}


@dataclass(frozen=True, slots=True)
class SessionDecision:
    """
    Outcome of one session check.

    Exactly one of ``principal`` and ``rejection`` is set. ``renewed`` is set
    only when the refresh flow rotated the credentials.

    :param principal: Identity attached to the request on acceptance.
    :type principal: Principal | None
    :param renewed: Rotated token pair to hand back to the client.
    :type renewed: TokenPair | None
    :param rejection: Reason for refusing the request.
    :type rejection: Rejection | None
    """

    principal: Principal | None = None
    renewed: TokenPair | None = None
    rejection: Rejection | None = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None

    @classmethod
    def accept(cls, principal: Principal, renewed: TokenPair | None = None) -> SessionDecision:
        return cls(principal=principal, renewed=renewed)

    @classmethod
    def reject(cls, rejection: Rejection) -> SessionDecision:
        return cls(rejection=rejection)


class SessionDecisionEngine:
    """
    Per-request session state machine.

    :param codec: Verifies access and refresh tokens.
    :param registry: Revocation registry consulted on every refresh.
    :param identities: Re-hydrates the principal during the refresh flow.
    :param issuer: Mints the rotated pair.
    :param revoke_on_rotation: Revoke the presented refresh token once the
        rotated pair has been issued.
    """

    def __init__(
        self,
        *,
        codec: TokenCodec,
        registry: RevocationRegistry,
        identities: IdentityLookup,
        issuer: SessionIssuer,
        revoke_on_rotation: bool = False,
    ) -> None:
        self.codec = codec
        self.registry = registry
        self.identities = identities
        self.issuer = issuer
        self.revoke_on_rotation = revoke_on_rotation

    def decide(self, access_token: str | None, refresh_token: str | None) -> SessionDecision:
        """
        Decide whether a request carrying these credentials may proceed.

        :param access_token: Bearer token, ``None`` or empty when absent.
        :param refresh_token: Refresh cookie value, ``None`` or empty when absent.
        :returns: Decision for the boundary layer.
        :rtype: SessionDecision
        """
        if not refresh_token:
            # a lone access token is treated as leaked
            branch = "access_only" if access_token else "none"
            return self._rejected(branch, Rejection.UNAUTHENTICATED)

        if not access_token:
            return self._refresh("refresh_only", refresh_token)

        principal = self._verify_access(access_token)
        if principal is not None:
            log.debug("session.accepted", extra={"branch": "access", "user_id": principal.id})
            return SessionDecision.accept(principal)
        return self._refresh("access_fallback", refresh_token)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _verify_access(self, token: str) -> Principal | None:
        result = self.codec.verify(token, kind=TokenKind.ACCESS)
        if not result.ok or result.payload is None:
            return None
        try:
            return Principal.from_claims(result.payload)
        except ValueError:
            log.info(
                "session.access_payload_invalid",
                extra={"reason": "malformed", "token_fp": token_fingerprint(token)},
            )
            return None

    def _refresh(self, branch: str, refresh_token: str) -> SessionDecision:
        fp = token_fingerprint(refresh_token)

        result = self.codec.verify(refresh_token, kind=TokenKind.REFRESH)
        if not result.ok or result.payload is None:
            return self._rejected(branch, Rejection.SESSION_EXPIRED, fp)

        # revocation wins over any payload defect
        try:
            revoked = self.registry.is_revoked(refresh_token)
        except StoreUnavailableError as exc:
            return self._store_unavailable(branch, exc, fp)
        if revoked:
            return self._rejected(branch, Rejection.SESSION_EXPIRED, fp)

        try:
            user_id = coerce_user_id(result.payload.get("id"))
        except ValueError:
            return self._rejected(branch, Rejection.MALFORMED, fp)

        try:
            principal = self.identities.find_by_id(user_id)
        except StoreUnavailableError as exc:
            return self._store_unavailable(branch, exc, fp)

        if principal is None:
            return self._rejected(branch, Rejection.SESSION_EXPIRED, fp)

        renewed = self.issuer.issue_session(principal)

        if self.revoke_on_rotation:
            try:
                self.registry.revoke(refresh_token)
            except StoreUnavailableError:
                # rotated pair is discarded; the old token stays usable
                return self._rejected(branch, Rejection.UNAVAILABLE, fp)

        log.info(
            "session.rotated",
            extra={"branch": branch, "user_id": principal.id, "token_fp": fp},
        )
        return SessionDecision.accept(principal, renewed)

    def _store_unavailable(
        self, branch: str, exc: StoreUnavailableError, token_fp: str
    ) -> SessionDecision:
        log.error(
            "session.store_unavailable",
            extra={"branch": branch, "reason": exc.store, "token_fp": token_fp},
        )
        return self._rejected(branch, Rejection.UNAVAILABLE, token_fp)

    @staticmethod
    def _rejected(
        branch: str, rejection: Rejection, token_fp: str | None = None
    ) -> SessionDecision:
        extra = {"branch": branch, "rejection": rejection.code}
        if token_fp:
            extra["token_fp"] = token_fp
        log.warning("session.rejected", extra=extra)
        return SessionDecision.reject(rejection)
