"""Unit tests for AuthService orchestration (sign-up, sign-in, sign-out)."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import Mock

import pytest
import responses

from authapp.infra.google.userinfo_client import GoogleUserInfoClient
from authapp.infra.jwt.flask_jwt_token_codec import JWTTokenCodec
from authapp.services._shared.errors import (
    ConflictError,
    IdentityProviderError,
    InvalidCredentialsError,
    NotFoundError,
)
from authapp.services._shared.ports import InMemoryRevocationRegistry, TokenKind
from authapp.services.auth.dto import Provider, SignInIn, SignUpIn
from authapp.services.auth.service import AuthService
from authapp.services.identity.service import IdentityService
from authapp.services.session import SessionIssuer
from tests.factories.user import UserFactory

USERINFO_URL = "https://idp.test/userinfo"


@pytest.fixture()
def registry():
    return InMemoryRevocationRegistry()


@pytest.fixture()
def codec(db):
    return JWTTokenCodec()


@pytest.fixture()
def service(codec, registry):
    return AuthService(
        identities=IdentityService(),
        issuer=SessionIssuer(
            codec,
            access_lifetime=timedelta(days=1),
            refresh_lifetime=timedelta(days=15),
        ),
        registry=registry,
        identity_provider=GoogleUserInfoClient(url=USERINFO_URL, timeout=1),
    )


def _google_profile(email="grace@gmail.com"):
    return {
        "email": email,
        "given_name": "Grace",
        "family_name": "Hopper",
        "picture": "https://img/grace.png",
    }


class TestSignUp:
    def test_credential_sign_up_issues_a_session(self, service, codec):
        out = service.sign_up(
            SignUpIn(provider=Provider.CREDENTIAL, name="Ada", email="a@mail.com", password="secret1")
        )

        assert out.principal.email == "a@mail.com"
        access = codec.verify(out.tokens.access_token, kind=TokenKind.ACCESS)
        refresh = codec.verify(out.tokens.refresh_token, kind=TokenKind.REFRESH)
        assert access.payload["name"] == "Ada"
        assert refresh.payload == {"id": out.principal.id}

    def test_duplicate_sign_up_conflicts(self, service):
        UserFactory(email="a@mail.com")

        with pytest.raises(ConflictError):
            service.sign_up(
                SignUpIn(provider=Provider.CREDENTIAL, name="A", email="a@mail.com", password="secret1")
            )

    @responses.activate
    def test_google_sign_up_uses_the_provider_profile(self, service):
        responses.get(USERINFO_URL, json=_google_profile())

        out = service.sign_up(SignUpIn(provider=Provider.GOOGLE, token="google-token"))

        assert out.principal.name == "Grace Hopper"
        assert out.principal.image == "https://img/grace.png"
        assert responses.calls[0].request.headers["Authorization"] == "Bearer google-token"

    @responses.activate
    def test_google_rejection_is_an_identity_provider_error(self, service):
        responses.get(USERINFO_URL, status=401, json={"error": "invalid_token"})

        with pytest.raises(IdentityProviderError):
            service.sign_up(SignUpIn(provider=Provider.GOOGLE, token="expired"))


class TestSignIn:
    def test_credential_sign_in(self, service):
        user = UserFactory(email="a@mail.com")

        out = service.sign_in(
            SignInIn(provider=Provider.CREDENTIAL, email="a@mail.com", password="secret1")
        )

        assert out.principal.id == user.id

    def test_wrong_password(self, service):
        UserFactory(email="a@mail.com")

        with pytest.raises(InvalidCredentialsError):
            service.sign_in(SignInIn(provider=Provider.CREDENTIAL, email="a@mail.com", password="nope12"))

    def test_unknown_email(self, service):
        with pytest.raises(NotFoundError):
            service.sign_in(SignInIn(provider=Provider.CREDENTIAL, email="x@mail.com", password="secret1"))

    @responses.activate
    def test_google_sign_in_for_provider_account(self, service):
        user = UserFactory(email="grace@gmail.com", oauth=True)
        responses.get(USERINFO_URL, json=_google_profile())

        out = service.sign_in(SignInIn(provider=Provider.GOOGLE, token="google-token"))

        assert out.principal.id == user.id


class TestSignOut:
    def test_sign_out_revokes_the_refresh_token(self, service, registry):
        service.sign_out("some-refresh-token")
        service.sign_out("some-refresh-token")

        assert registry.is_revoked("some-refresh-token") is True

    def test_sign_out_without_token_is_a_no_op(self, service):
        service.registry = Mock(spec=InMemoryRevocationRegistry)

        service.sign_out(None)

        service.registry.revoke.assert_not_called()
