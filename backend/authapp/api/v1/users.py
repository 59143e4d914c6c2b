"""User endpoints."""

from __future__ import annotations

from flask import Blueprint

from authapp.api.deps import current_principal, json_response, timing
from authapp.schemas import PrincipalSchema

bp = Blueprint("users", __name__)

principal_schema = PrincipalSchema()


@bp.get("/me")
@timing
def me():
    """Return the principal resolved by the session check."""

    return json_response(principal_schema.dump(current_principal()))
