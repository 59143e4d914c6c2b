"""Unit tests for the Google userinfo client (HTTP stubbed with responses)."""

from __future__ import annotations

import pytest
import requests
import responses

from authapp.infra.google.userinfo_client import GoogleUserInfoClient
from authapp.services._shared.errors import IdentityProviderError
from authapp.services._shared.ports import ProviderProfile

URL = "https://idp.test/userinfo"


@pytest.fixture
def client():
    return GoogleUserInfoClient(url=URL, timeout=1)


@responses.activate
def test_profile_is_built_from_userinfo(client):
    responses.get(
        URL,
        json={
            "email": "grace@gmail.com",
            "given_name": "Grace",
            "family_name": "Hopper",
            "picture": "https://img/grace.png",
        },
    )

    profile = client.fetch_profile("tok")

    assert profile == ProviderProfile(
        name="Grace Hopper", email="grace@gmail.com", image="https://img/grace.png"
    )


@responses.activate
def test_name_falls_back_to_email_local_part(client):
    responses.get(URL, json={"email": "solo@gmail.com"})

    assert client.fetch_profile("tok").name == "solo"


@responses.activate
@pytest.mark.parametrize(
    "kwargs",
    [
        {"status": 401, "json": {"error": "invalid_token"}},
        {"status": 200, "body": "not json"},
        {"status": 200, "json": {"given_name": "No Email"}},
        {"body": requests.ConnectionError("down")},
    ],
)
def test_failures_raise_identity_provider_error(client, kwargs):
    responses.get(URL, **kwargs)

    with pytest.raises(IdentityProviderError) as exc_info:
        client.fetch_profile("tok")

    assert str(exc_info.value) == "Invalid token."


@responses.activate
@pytest.mark.parametrize(
    "email",
    [f"{'g' * 60}@gmail.com", "root@localhost", "@gmail.com", 42],
)
def test_emails_the_users_table_refuses_are_rejected(client, email):
    responses.get(URL, json={"email": email, "given_name": "Grace"})

    with pytest.raises(IdentityProviderError):
        client.fetch_profile("tok")


@responses.activate
def test_oversized_profile_fields_are_capped(client):
    responses.get(
        URL,
        json={
            "email": "grace@gmail.com",
            "given_name": "  " + "G" * 70,
            "family_name": "   ",
            "picture": "https://img/" + "p" * 300,
        },
    )

    profile = client.fetch_profile("tok")

    assert profile.name == "G" * 64
    assert profile.image is None
