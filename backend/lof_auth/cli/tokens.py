"""Flask CLI commands for refresh token maintenance."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from lof_auth.core.wiring import get_components

LOGGER = logging.getLogger(__name__)


@click.group("tokens")
def tokens_cli() -> None:
    """Refresh token maintenance commands."""


@tokens_cli.command("purge")
@with_appcontext
def purge_command() -> None:
    """Delete expired refresh tokens now."""
    removed = get_components().token_service.purge_expired()
    click.echo(f"Purged {removed} expired refresh token(s).")


@tokens_cli.command("revoke-user")
@click.argument("user_id", type=int)
@with_appcontext
def revoke_user_command(user_id: int) -> None:
    """Revoke every refresh session of USER_ID."""
    removed = get_components().token_service.revoke_all(user_id)
    LOGGER.info("Revoked sessions from CLI", extra={"user_id": user_id, "removed": removed})
    click.echo(f"Revoked {removed} session(s) for user {user_id}.")
