# authapp/services/session/issuance.py
from __future__ import annotations

from datetime import timedelta

from authapp.services._shared.dto import Principal, TokenPair
from authapp.services._shared.ports import TokenCodec, TokenKind


class SessionIssuer:
    """
    Mint the access/refresh pair for a verified principal.

    The access token carries the full principal, the refresh token only the
    user id. Attaching the tokens to a response is the boundary's job; see
    :mod:`authapp.api.session`.

    :param codec: Token codec used for signing.
    :param access_lifetime: Access token lifetime.
    :param refresh_lifetime: Refresh token lifetime.
    """

    def __init__(
        self,
        codec: TokenCodec,
        *,
        access_lifetime: timedelta,
        refresh_lifetime: timedelta,
    ) -> None:
        self.codec = codec
        self.access_lifetime = access_lifetime
        self.refresh_lifetime = refresh_lifetime

    def issue_session(self, principal: Principal) -> TokenPair:
        """
        Issue a fresh token pair.

        :param principal: Identity already verified by the caller.
        :returns: New access and refresh tokens.
        :rtype: TokenPair
        """
        access = self.codec.issue(principal.to_claims(), self.access_lifetime)
        refresh = self.codec.issue(
            {"id": principal.id}, self.refresh_lifetime, kind=TokenKind.REFRESH
        )
        return TokenPair(access_token=access, refresh_token=refresh)
