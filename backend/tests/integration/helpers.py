"""Shared helpers for the HTTP-level tests."""

from __future__ import annotations

from authapp.services._shared.errors import StoreUnavailableError
from authapp.services._shared.ports import InMemoryRevocationRegistry

COOKIE = "refresh_token"


class BrokenRegistry(InMemoryRevocationRegistry):
    """Registry whose every call fails like an unreachable Redis."""

    def revoke(self, refresh_token: str) -> None:
        raise StoreUnavailableError("revocation registry")

    def is_revoked(self, refresh_token: str) -> bool:
        raise StoreUnavailableError("revocation registry")


def signup(client, email: str, password: str = "secret1", **extra):
    """Sign up through the API and return ``(access_token, refresh_token)``."""
    resp = client.post("/api/v1/auth/signup", json={"email": email, "password": password, **extra})
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["accessToken"], client.get_cookie(COOKIE).value


def set_cookies(client, refresh_token: str | None) -> None:
    """Replace the client's refresh cookie (``None`` removes it)."""
    client.delete_cookie(COOKIE)
    if refresh_token is not None:
        client.set_cookie(COOKIE, refresh_token)


def bearer(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}
