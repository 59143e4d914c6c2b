# comments in English; reST docstrings strict
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated identity resolved for a single request.

    :param id: Stable user identifier.
    :type id: int
    :param name: Display name.
    :type name: str
    :param email: Login email.
    :type email: str
    :param image: Avatar reference, when the user has one.
    :type image: str | None
    """

    id: int
    name: str
    email: str
    image: str | None = None

    def to_claims(self) -> dict[str, Any]:
        """Return the access token payload for this principal."""
        return {"id": self.id, "name": self.name, "email": self.email, "image": self.image}

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> Principal:
        """
        Rebuild a principal from an access token payload.

        :param claims: Verified payload.
        :returns: Principal carried by the payload.
        :raises ValueError: If the payload is structurally invalid.
        """
        user_id = coerce_user_id(claims.get("id"))
        name, email, image = claims.get("name"), claims.get("email"), claims.get("image")
        if not isinstance(name, str) or not isinstance(email, str):
            raise ValueError("Access token payload lacks name/email.")
        if image is not None and not isinstance(image, str):
            raise ValueError("Access token image must be a string or null.")
        return cls(id=user_id, name=name, email=email, image=image)


@dataclass(frozen=True, slots=True)
class TokenPair:
    """
    Access and refresh tokens issued together.

    :param access_token: Encoded access token (response body).
    :type access_token: str
    :param refresh_token: Encoded refresh token (cookie).
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


def coerce_user_id(value: Any) -> int:
    """
    Return ``value`` as a positive integer user id.

    :raises ValueError: When the value is not an integer id.
    """
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int | str):
        raise ValueError("Invalid user id.")
    if isinstance(value, str):
        if not value.isdigit():
            raise ValueError("Invalid user id.")
        value = int(value)
    if value <= 0:
        raise ValueError("Invalid user id.")
    return value
