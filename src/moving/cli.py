"""``moving`` command line: global flags, then ``serve`` or ``upgrade``."""

from __future__ import annotations

import logging

import click

from moving import __version__
from moving.commands import register_commands
from moving.commands._base import MovingGroup
from moving.commands._context import AppContext
from moving.config.settings import MovingSettings

logger = logging.getLogger(__name__)


@click.group(cls=MovingGroup, invoke_without_command=True)
@click.version_option(__version__, prog_name="moving")
@click.option(
    "-c",
    "--config",
    "config_path",
    metavar="PATH",
    help="moving.toml to use instead of searching upward from the working directory.",
)
@click.option("--debug", is_flag=True, help="Log at DEBUG, including request and response bodies.")
@click.option("--log-json", is_flag=True, help="One JSON object per log line.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, debug: bool, log_json: bool) -> None:
    """Order intake and customer reviews for a moving company.

    Serves the MovingService gRPC API, its HTTP/JSON gateway and a
    Prometheus endpoint from one process.
    """
    settings = MovingSettings.from_cli(
        config_path=config_path,
        debug=True if debug else None,
        log_json=True if log_json else None,
    )
    ctx.obj = AppContext(settings)
    logger.debug("Configuration from %s", settings.config_path or "environment and defaults")
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
