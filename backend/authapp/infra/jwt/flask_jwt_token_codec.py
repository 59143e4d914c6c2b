# authapp/infra/jwt/flask_jwt_token_codec.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, cast

import jwt as pyjwt
from flask_jwt_extended.exceptions import JWTDecodeError

from authapp.services._shared.ports import (
    TokenCodec,
    TokenKind,
    Verification,
    VerificationError,
    token_fingerprint,
)

log = logging.getLogger(__name__)

# Claims added by Flask-JWT-Extended / PyJWT; never part of a caller payload.
RESERVED_CLAIMS = frozenset({"sub", "jti", "type", "fresh", "iat", "nbf", "exp", "csrf"})


@dataclass(slots=True)
class JWTTokenCodec(TokenCodec):
    """
    Token codec backed by Flask-JWT-Extended (HS256 over ``JWT_SECRET_KEY``).

    The payload must carry an ``id`` entry; it becomes the ``sub`` claim and
    the remaining entries travel as additional claims.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def issue(
        self,
        payload: Mapping[str, Any],
        lifetime: timedelta,
        *,
        kind: TokenKind = TokenKind.ACCESS,
    ) -> str:
        from flask_jwt_extended import create_access_token as _create_access
        from flask_jwt_extended import create_refresh_token as _create_refresh

        clash = RESERVED_CLAIMS.intersection(payload)
        if clash:
            raise ValueError(f"Payload uses reserved claims: {sorted(clash)}")
        if "id" not in payload:
            raise ValueError("Token payload requires an 'id' entry.")

        # Flask-JWT-Extended requires a string subject
        identity = str(payload["id"])
        claims = dict(payload)
        if kind is TokenKind.REFRESH:
            token = _create_refresh(
                identity=identity, additional_claims=claims, expires_delta=lifetime
            )
        else:
            token = _create_access(
                identity=identity, additional_claims=claims, expires_delta=lifetime
            )
        return cast(str, token)

    def verify(self, token: str, *, kind: TokenKind | None = None) -> Verification:
        from flask_jwt_extended import decode_token

        try:
            claims = cast(dict[str, Any], decode_token(token))
        except pyjwt.ExpiredSignatureError:
            return self._reject(token, VerificationError.EXPIRED)
        except pyjwt.InvalidSignatureError:
            return self._reject(token, VerificationError.SIGNATURE_MISMATCH)
        except (pyjwt.InvalidTokenError, JWTDecodeError):
            # DecodeError, ImmatureSignatureError, missing claims, ...
            return self._reject(token, VerificationError.MALFORMED)

        if kind is not None and claims.get("type") != kind.value:
            return self._reject(token, VerificationError.MALFORMED)

        payload = {k: v for k, v in claims.items() if k not in RESERVED_CLAIMS}
        return Verification(payload=payload)

    @staticmethod
    def _reject(token: str, error: VerificationError) -> Verification:
        log.info(
            "token.verify_failed",
            extra={"reason": error.value, "token_fp": token_fingerprint(token)},
        )
        return Verification.failed(error)
