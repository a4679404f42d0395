"""Subcommand modules for the ``moving`` CLI.

:func:`register_commands` imports lazily so ``moving --help`` does not
pull in gRPC, Starlette and SQLAlchemy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root group."""
    from moving.commands.serve import serve
    from moving.commands.upgrade import upgrade

    cli.add_command(serve)
    cli.add_command(upgrade)
