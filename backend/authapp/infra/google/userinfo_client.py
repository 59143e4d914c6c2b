"""Google userinfo client resolving an OAuth access token to a profile."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

from authapp.services._shared.errors import IdentityProviderError
from authapp.services._shared.ports import IdentityProvider, ProviderProfile

log = logging.getLogger(__name__)

GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"

# Column sizes of ``users``
NAME_MAX_LENGTH = 64
EMAIL_MAX_LENGTH = 64
IMAGE_MAX_LENGTH = 256


@dataclass(slots=True)
class GoogleUserInfoClient(IdentityProvider):
    """
    Call Google's userinfo endpoint with the caller's bearer token.

    :param url: Userinfo endpoint.
    :param timeout: Request timeout in seconds.
    """

    url: str = GOOGLE_USERINFO_URL
    timeout: float = 5.0

    def fetch_profile(self, token: str) -> ProviderProfile:
        """
        Resolve ``token`` to a :class:`ProviderProfile`.

        :raises IdentityProviderError: On transport errors, non-2xx answers,
            or a missing or unstorable email.
        """
        try:
            resp = requests.get(
                self.url,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            log.warning("google.userinfo_failed: %s", type(exc).__name__)
            raise IdentityProviderError() from exc

        email = data.get("email") if isinstance(data, dict) else None
        if not _usable_email(email):
            log.warning("google.userinfo_unusable_email")
            raise IdentityProviderError()
        name = " ".join(
            part.strip()
            for part in (data.get("given_name"), data.get("family_name"))
            if isinstance(part, str) and part.strip()
        )
        image = data.get("picture")
        if not isinstance(image, str) or len(image) > IMAGE_MAX_LENGTH:
            image = None
        return ProviderProfile(
            name=(name or email.split("@")[0])[:NAME_MAX_LENGTH],
            email=email,
            image=image,
        )


def _usable_email(email: object) -> bool:
    """Whether ``email`` fits the ``users.email`` column rules."""
    if not isinstance(email, str) or len(email) > EMAIL_MAX_LENGTH:
        return False
    local, sep, domain = email.strip().rpartition("@")
    return bool(sep and local and "." in domain)
