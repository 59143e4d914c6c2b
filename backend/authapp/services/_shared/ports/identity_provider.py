from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class ProviderProfile:
    """
    Profile fields returned by a third-party identity provider.

    :param name: Display name (``given_name family_name`` for Google).
    :param email: Verified email address.
    :param image: Avatar URL, if any.
    """

    name: str
    email: str
    image: str | None = None


class IdentityProvider(Protocol):
    """Exchange a provider bearer token for the user's profile."""

    def fetch_profile(self, token: str) -> ProviderProfile: ...
