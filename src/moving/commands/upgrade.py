"""Command: database schema migration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from moving.commands._base import MovingCommand

if TYPE_CHECKING:
    from moving.commands._context import AppContext


@click.command(
    cls=MovingCommand,
    sections=("database",),
    examples="""\
  moving upgrade
  moving upgrade --check
  MOVING_SERVICE_DATABASE__URL=postgresql://app@db/moving moving upgrade""",
)
@click.option(
    "--check", "check_only", is_flag=True, help="Show the current revision without migrating."
)
@click.pass_obj
def upgrade(app: AppContext, check_only: bool) -> None:
    """Migrate the database to the latest schema revision."""
    from sqlalchemy.exc import SQLAlchemyError

    from moving.infrastructure.database.migrations import current_revision, upgrade_head

    url = app.settings.database.url
    try:
        if check_only:
            revision = current_revision(url)
            click.echo(f"current revision: {revision or 'none'}")
            return
        upgrade_head(url)
        click.echo(f"database upgraded to {current_revision(url)}")
    except SQLAlchemyError as exc:
        raise click.ClickException(f"failed to migrate database | {exc}") from exc
