"""Click base classes for ``moving`` commands.

``MovingCommand`` adds two things to a plain Click command:

* ``examples=...`` attaches an eager ``--examples`` flag that prints usage
  examples and exits, keeping ``--help`` short.
* ``sections=(...)`` names the ``moving.toml`` sections the command reads;
  ``--help`` then ends with where each can be set (file table or env
  prefix), so operators do not have to look the names up.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import click

ENV_PREFIX = "MOVING_SERVICE_"


def section_help(sections: Sequence[str]) -> str:
    """``--help`` epilog listing the TOML table and env prefix per section."""
    lines = ["\b", "Configuration:"]
    for name in sections:
        lines.append(f"  [{name}] in moving.toml, or {ENV_PREFIX}{name.upper()}__<FIELD>")
    return "\n".join(lines)


def _show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(examples)
    ctx.exit(0)


class MovingCommand(click.Command):
    """Command with optional ``--examples`` flag and configuration epilog."""

    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        sections: Sequence[str] = (),
        **kwargs: Any,
    ) -> None:
        if sections and not kwargs.get("epilog"):
            kwargs["epilog"] = section_help(sections)
        super().__init__(*args, **kwargs)
        self.examples = examples
        self.sections = tuple(sections)
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_show_examples,
                    help="Show usage examples.",
                )
            )


class MovingGroup(click.Group):
    """Root group; subcommands default to :class:`MovingCommand`."""

    command_class = MovingCommand
