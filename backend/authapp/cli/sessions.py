"""Flask CLI commands for inspecting and revoking refresh tokens."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from authapp.api.session import get_registry
from authapp.infra.jwt.flask_jwt_token_codec import JWTTokenCodec
from authapp.services._shared.errors import StoreUnavailableError
from authapp.services._shared.ports import token_fingerprint

LOGGER = logging.getLogger(__name__)


@click.group("sessions")
def sessions_cli() -> None:
    """Administrative commands for refresh-token sessions."""


@sessions_cli.command("revoke")
@click.argument("token")
@with_appcontext
def revoke_command(token: str) -> None:
    """Add TOKEN to the revocation registry for the rest of its lifetime."""
    fp = token_fingerprint(token)
    try:
        get_registry().revoke(token)
    except StoreUnavailableError as exc:
        raise click.ClickException(f"Revocation registry unavailable: {exc}") from exc
    LOGGER.info("sessions.revoked", extra={"token_fp": fp})
    click.echo(f"Revoked token {fp}.")


@sessions_cli.command("status")
@click.argument("token")
@with_appcontext
def status_command(token: str) -> None:
    """Show whether TOKEN verifies and whether it is revoked."""
    result = JWTTokenCodec().verify(token)
    verification = result.error.value if result.error is not None else "ok"
    try:
        revoked = "yes" if get_registry().is_revoked(token) else "no"
    except StoreUnavailableError:
        revoked = "unknown (registry unavailable)"

    click.echo(f"fingerprint:  {token_fingerprint(token)}")
    click.echo(f"verification: {verification}")
    if result.ok and result.payload is not None:
        click.echo(f"user id:      {result.payload.get('id')}")
    click.echo(f"revoked:      {revoked}")
