"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from authapp.api.deps import json_response, timing
from authapp.api.session import (
    clear_refresh_cookie,
    get_auth_service,
    refresh_cookie,
    set_refresh_cookie,
)
from authapp.schemas import SignInSchema, SignUpSchema, TokenResponseSchema
from authapp.services.auth.dto import SessionOut

bp = Blueprint("auth", __name__)

signup_schema = SignUpSchema()
signin_schema = SignInSchema()
token_schema = TokenResponseSchema()


def _session_response(session: SessionOut, *, status: int):
    response = json_response(token_schema.dump(session.tokens), status=status)
    set_refresh_cookie(response, session.tokens.refresh_token)
    return response


@bp.post("/signup")
@timing
def signup():
    """Create an account and open a session (201)."""

    dto = signup_schema.load(request.get_json(silent=True) or {})
    session = get_auth_service().sign_up(dto)
    return _session_response(session, status=201)


@bp.post("/signin")
@timing
def signin():
    """Authenticate and open a session."""

    dto = signin_schema.load(request.get_json(silent=True) or {})
    session = get_auth_service().sign_in(dto)
    return _session_response(session, status=200)


@bp.post("/signout")
@timing
def signout():
    """Revoke the refresh cookie and clear it (204)."""

    get_auth_service().sign_out(refresh_cookie())
    response = current_app.response_class(status=204)
    clear_refresh_cookie(response)
    return response
