from __future__ import annotations

from typing import Protocol

from authapp.services._shared.dto import Principal


class IdentityLookup(Protocol):
    """
    Resolve a stable user id to the profile fields embedded in tokens.

    Implementations raise
    :class:`~authapp.services._shared.errors.StoreUnavailableError` when the
    backing store cannot answer.
    """

    def find_by_id(self, user_id: int) -> Principal | None: ...
