"""Flask CLI commands for account administration."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from shopdesk.core.container import get_container
from shopdesk.services._shared.errors import ValidationFailedError
from shopdesk.services.identity.dto import AdminCreateIn

LOGGER = logging.getLogger(__name__)


@click.group("users")
def users_cli() -> None:
    """Collection of account administration commands."""


@users_cli.command("create-admin")
@click.option("--email", required=True, help="Login email of the administrator.")
@click.option("--name", required=True, help="Display name (3..30 characters).")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password; prompted when omitted. Ignored when promoting an existing account.",
)
@with_appcontext
def create_admin_command(email: str, name: str, password: str) -> None:
    """Create an administrator, or grant the role to an existing account."""
    if len(password) < 6:
        raise click.BadParameter("must be at least 6 characters", param_hint="--password")
    try:
        user, created = get_container().identity.create_admin(
            AdminCreateIn(name=name, email=email, password=password)
        )
    except ValidationFailedError as exc:
        raise click.ClickException(str(exc)) from exc
    verb = "Created" if created else "Promoted"
    LOGGER.debug("create-admin finished created=%s", created)
    click.echo(f"{verb} administrator {user.email} (id={user.id})")
