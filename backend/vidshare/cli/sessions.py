"""Flask CLI commands for inspecting and revoking user sessions."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from vidshare.infra.providers import build_auth_service
from vidshare.infra.sqlalchemy.identity_store import SQLAlchemyIdentityStore
from vidshare.services._shared.errors import ServiceError
from vidshare.services._shared.ports import IdentityRecord

LOGGER = logging.getLogger(__name__)


def _resolve(login: str) -> IdentityRecord:
    """Find an identity by username or email, or abort the command."""
    record = SQLAlchemyIdentityStore().find_by_username_or_email(username=login, email=login)
    if record is None:
        raise click.ClickException(f"No user matches {login!r}.")
    return record


@click.group("sessions")
def sessions_cli() -> None:
    """Inspect and revoke refresh-token sessions."""


@sessions_cli.command("show")
@click.argument("login")
@with_appcontext
def show(login: str) -> None:
    """Show whether LOGIN (username or email) has a live session."""
    record = _resolve(login)
    service = build_auth_service(current_app.config)
    try:
        active = service.has_session(record.id)
    except ServiceError as exc:
        raise click.ClickException(str(exc)) from exc
    state = "active" if active else "none"
    click.echo(f"{record.username} (id={record.id}): session {state}")


@sessions_cli.command("revoke")
@click.argument("login")
@with_appcontext
def revoke(login: str) -> None:
    """Terminate the session of LOGIN; its refresh token stops working."""
    record = _resolve(login)
    service = build_auth_service(current_app.config)
    try:
        service.terminate(record.id)
    except ServiceError as exc:
        raise click.ClickException(str(exc)) from exc
    LOGGER.info("cli.sessions.revoked", extra={"identity_id": record.id})
    click.echo(f"Session revoked for {record.username} (id={record.id}).")
