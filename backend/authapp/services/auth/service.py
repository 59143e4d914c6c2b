# authapp/services/auth/service.py
from __future__ import annotations

import logging

from authapp.services._shared.base import BaseService
from authapp.services._shared.dto import Principal
from authapp.services._shared.ports import (
    IdentityProvider,
    RevocationRegistry,
    token_fingerprint,
)
from authapp.services.auth.dto import Provider, SessionOut, SignInIn, SignUpIn
from authapp.services.identity.dto import UserAuthIn, UserRegisterIn
from authapp.services.identity.service import IdentityService
from authapp.services.session.issuance import SessionIssuer

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Session lifecycle at the edges: sign-up, sign-in and sign-out.

    Both sign-up and sign-in end with a freshly issued token pair; sign-out
    revokes the presented refresh token. Per-request session checks are the
    job of :class:`~authapp.services.session.SessionDecisionEngine`.
    """

    def __init__(
        self,
        *,
        identities: IdentityService,
        issuer: SessionIssuer,
        registry: RevocationRegistry,
        identity_provider: IdentityProvider,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param identities: User registration and credential checks.
        :param issuer: Token pair factory.
        :param registry: Revocation registry used on sign-out.
        :param identity_provider: Third-party profile lookup (Google).
        """
        super().__init__()
        self.identities = identities
        self.issuer = issuer
        self.registry = registry
        self.identity_provider = identity_provider

    # ------------------------------------------------------------------ #
    # Sign-up
    # ------------------------------------------------------------------ #

    def sign_up(self, dto: SignUpIn) -> SessionOut:
        """
        Create an account and open a session for it.

        :param dto: Sign-up input.
        :returns: Principal and token pair.
        :raises ConflictError: When the email is already registered.
        :raises IdentityProviderError: When the provider token is rejected.
        """
        if dto.provider is Provider.GOOGLE:
            profile = self.identity_provider.fetch_profile(dto.token or "")
            register = UserRegisterIn(name=profile.name, email=profile.email, image=profile.image)
        else:
            register = UserRegisterIn(
                name=dto.name or "",
                email=dto.email or "",
                password=dto.password,
            )
        principal = self.identities.register(register)
        return self._open_session("signup", principal)

    # ------------------------------------------------------------------ #
    # Sign-in
    # ------------------------------------------------------------------ #

    def sign_in(self, dto: SignInIn) -> SessionOut:
        """
        Authenticate an existing account and open a session.

        :param dto: Sign-in input.
        :returns: Principal and token pair.
        :raises NotFoundError: When no user owns the email.
        :raises InvalidCredentialsError: On password or provider mismatch.
        :raises IdentityProviderError: When the provider token is rejected.
        """
        if dto.provider is Provider.GOOGLE:
            profile = self.identity_provider.fetch_profile(dto.token or "")
            auth = UserAuthIn(email=profile.email)
        else:
            auth = UserAuthIn(email=dto.email or "", password=dto.password or "")
        principal = self.identities.authenticate(auth)
        return self._open_session("signin", principal)

    # ------------------------------------------------------------------ #
    # Sign-out
    # ------------------------------------------------------------------ #

    def sign_out(self, refresh_token: str | None) -> None:
        """
        Revoke the presented refresh token. Idempotent; a missing token is
        a no-op.

        :raises StoreUnavailableError: When the registry cannot record it.
        """
        if not refresh_token:
            return
        self.registry.revoke(refresh_token)
        log.info("auth.signout", extra={"token_fp": token_fingerprint(refresh_token)})

    def _open_session(self, action: str, principal: Principal) -> SessionOut:
        tokens = self.issuer.issue_session(principal)
        log.info(f"auth.{action}", extra={"user_id": principal.id})
        return SessionOut(principal=principal, tokens=tokens)
