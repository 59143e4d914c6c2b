"""Unit tests for the session decision engine.

The engine runs against the real token codec, the in-memory revocation
registry and an in-memory identity lookup.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from authapp.infra.jwt.flask_jwt_token_codec import JWTTokenCodec
from authapp.services._shared.dto import Principal
from authapp.services._shared.errors import StoreUnavailableError
from authapp.services._shared.ports import (
    IdentityLookup,
    InMemoryRevocationRegistry,
    TokenKind,
)
from authapp.services.session import (
    Rejection,
    SessionDecisionEngine,
    SessionIssuer,
)

ADA = Principal(id=1, name="Ada", email="ada@example.com", image=None)
START = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


class InMemoryIdentities(IdentityLookup):
    def __init__(self, *principals: Principal) -> None:
        self.by_id = {p.id: p for p in principals}
        self.unavailable = False
        self.calls = 0

    def find_by_id(self, user_id: int) -> Principal | None:
        self.calls += 1
        if self.unavailable:
            raise StoreUnavailableError("identity store")
        return self.by_id.get(user_id)


class BrokenRegistry(InMemoryRevocationRegistry):
    def __init__(self, *, fail_check: bool = True, fail_revoke: bool = True) -> None:
        super().__init__()
        self.fail_check = fail_check
        self.fail_revoke = fail_revoke

    def is_revoked(self, refresh_token: str) -> bool:
        if self.fail_check:
            raise StoreUnavailableError("revocation registry")
        return super().is_revoked(refresh_token)

    def revoke(self, refresh_token: str) -> None:
        if self.fail_revoke:
            raise StoreUnavailableError("revocation registry")
        super().revoke(refresh_token)


@pytest.fixture()
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture()
def codec(ctx):
    return JWTTokenCodec()


@pytest.fixture()
def issuer(codec):
    return SessionIssuer(
        codec,
        access_lifetime=timedelta(days=1),
        refresh_lifetime=timedelta(days=15),
    )


@pytest.fixture()
def identities():
    return InMemoryIdentities(ADA)


@pytest.fixture()
def registry():
    return InMemoryRevocationRegistry()


@pytest.fixture()
def build_engine(codec, issuer, identities, registry):
    def _build(**overrides):
        kwargs = {
            "codec": codec,
            "registry": registry,
            "identities": identities,
            "issuer": issuer,
        }
        kwargs.update(overrides)
        return SessionDecisionEngine(**kwargs)

    return _build


@pytest.fixture()
def engine(build_engine):
    return build_engine()


class TestBranchTable:
    def test_no_credentials_is_unauthenticated(self, engine):
        decision = engine.decide(None, None)

        assert decision.rejection is Rejection.UNAUTHENTICATED
        assert decision.principal is None
        assert decision.renewed is None

    def test_empty_strings_count_as_absent(self, engine):
        assert engine.decide("", "").rejection is Rejection.UNAUTHENTICATED

    def test_valid_access_token_alone_is_unauthenticated(self, engine, issuer):
        pair = issuer.issue_session(ADA)

        decision = engine.decide(pair.access_token, None)

        assert decision.rejection is Rejection.UNAUTHENTICATED

    def test_valid_pair_is_accepted_without_rotation(self, engine, issuer, identities):
        pair = issuer.issue_session(ADA)

        decision = engine.decide(pair.access_token, pair.refresh_token)

        assert decision.accepted
        assert decision.principal == ADA
        assert decision.renewed is None
        # access path needs no store lookup
        assert identities.calls == 0

    def test_refresh_token_alone_rotates(self, engine, issuer, codec):
        pair = issuer.issue_session(ADA)

        decision = engine.decide(None, pair.refresh_token)

        assert decision.accepted
        assert decision.principal == ADA
        assert decision.renewed is not None
        access = codec.verify(decision.renewed.access_token, kind=TokenKind.ACCESS)
        refresh = codec.verify(decision.renewed.refresh_token, kind=TokenKind.REFRESH)
        assert access.payload == ADA.to_claims()
        assert refresh.payload == {"id": ADA.id}

    def test_expired_access_falls_through_to_refresh(self, engine, issuer):
        with freeze_time(START) as frozen:
            pair = issuer.issue_session(ADA)
            frozen.move_to(START + timedelta(days=2))

            decision = engine.decide(pair.access_token, pair.refresh_token)

        assert decision.accepted
        assert decision.renewed is not None

    def test_refresh_token_in_bearer_slot_falls_through(self, engine, issuer):
        pair = issuer.issue_session(ADA)

        decision = engine.decide(pair.refresh_token, pair.refresh_token)

        assert decision.accepted
        assert decision.renewed is not None


class TestRefreshFlow:
    def test_revoked_refresh_token_is_session_expired(self, engine, issuer, registry):
        pair = issuer.issue_session(ADA)
        registry.revoke(pair.refresh_token)

        decision = engine.decide(None, pair.refresh_token)

        assert decision.rejection is Rejection.SESSION_EXPIRED
        assert decision.renewed is None

    def test_expired_access_and_revoked_refresh_is_rejected(self, engine, issuer, registry):
        with freeze_time(START) as frozen:
            pair = issuer.issue_session(ADA)
            registry.revoke(pair.refresh_token)
            frozen.move_to(START + timedelta(days=2))

            decision = engine.decide(pair.access_token, pair.refresh_token)

        assert decision.rejection is Rejection.SESSION_EXPIRED
        assert decision.renewed is None

    def test_expired_refresh_token_is_session_expired(self, engine, issuer):
        with freeze_time(START) as frozen:
            pair = issuer.issue_session(ADA)
            frozen.move_to(START + timedelta(days=16))

            decision = engine.decide(None, pair.refresh_token)

        assert decision.rejection is Rejection.SESSION_EXPIRED

    def test_garbage_refresh_token_is_session_expired(self, engine):
        assert engine.decide(None, "not-a-token").rejection is Rejection.SESSION_EXPIRED

    def test_access_token_in_cookie_slot_is_session_expired(self, engine, issuer):
        pair = issuer.issue_session(ADA)

        decision = engine.decide(None, pair.access_token)

        assert decision.rejection is Rejection.SESSION_EXPIRED

    def test_deleted_user_is_session_expired(self, engine, issuer, identities):
        pair = issuer.issue_session(ADA)
        identities.by_id.clear()

        assert engine.decide(None, pair.refresh_token).rejection is Rejection.SESSION_EXPIRED

    def test_refresh_payload_without_valid_id_is_malformed(self, engine, codec):
        token = codec.issue({"id": "not-a-number"}, timedelta(days=15), kind=TokenKind.REFRESH)

        assert engine.decide(None, token).rejection is Rejection.MALFORMED

    def test_revoked_token_with_invalid_id_is_session_expired(self, engine, codec, registry):
        token = codec.issue({"id": "not-a-number"}, timedelta(days=15), kind=TokenKind.REFRESH)
        registry.revoke(token)

        assert engine.decide(None, token).rejection is Rejection.SESSION_EXPIRED

    def test_rotation_uses_current_profile(self, engine, issuer, identities):
        pair = issuer.issue_session(ADA)
        renamed = Principal(id=ADA.id, name="Countess", email=ADA.email)
        identities.by_id[ADA.id] = renamed

        decision = engine.decide(None, pair.refresh_token)

        assert decision.principal == renamed

    def test_old_refresh_token_stays_usable_by_default(self, engine, issuer, registry):
        pair = issuer.issue_session(ADA)

        engine.decide(None, pair.refresh_token)

        assert registry.is_revoked(pair.refresh_token) is False
        assert engine.decide(None, pair.refresh_token).accepted


class TestFailClosed:
    def test_registry_unavailable_rejects(self, build_engine, issuer, identities):
        engine = build_engine(registry=BrokenRegistry())
        pair = issuer.issue_session(ADA)

        decision = engine.decide(None, pair.refresh_token)

        assert decision.rejection is Rejection.UNAVAILABLE
        assert decision.renewed is None
        assert identities.calls == 0

    def test_identity_store_unavailable_rejects(self, engine, issuer, identities):
        identities.unavailable = True
        pair = issuer.issue_session(ADA)

        assert engine.decide(None, pair.refresh_token).rejection is Rejection.UNAVAILABLE

    def test_valid_access_token_does_not_touch_the_registry(self, build_engine, issuer):
        engine = build_engine(registry=BrokenRegistry())
        pair = issuer.issue_session(ADA)

        assert engine.decide(pair.access_token, pair.refresh_token).accepted


class TestRevokeOnRotation:
    def test_old_refresh_token_is_revoked_after_rotation(self, build_engine, issuer, registry):
        engine = build_engine(revoke_on_rotation=True)
        pair = issuer.issue_session(ADA)

        first = engine.decide(None, pair.refresh_token)

        assert first.accepted
        assert registry.is_revoked(pair.refresh_token) is True
        assert engine.decide(None, pair.refresh_token).rejection is Rejection.SESSION_EXPIRED
        assert engine.decide(None, first.renewed.refresh_token).accepted

    def test_failed_revoke_rejects_the_rotation(self, build_engine, issuer):
        engine = build_engine(
            registry=BrokenRegistry(fail_check=False, fail_revoke=True),
            revoke_on_rotation=True,
        )
        pair = issuer.issue_session(ADA)

        decision = engine.decide(None, pair.refresh_token)

        assert decision.rejection is Rejection.UNAVAILABLE
        assert decision.renewed is None
