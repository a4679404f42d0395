"""AppContext: shared Click context for all commands.

Created once by the root group and handed to subcommands through
``@click.pass_obj``. Logging is configured here so every command logs the
same way; nothing touches the database until a command asks for it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from moving.config.logging import configure_logging

if TYPE_CHECKING:
    from moving.config.settings import MovingSettings


class AppContext:
    """Settings plus the one-time process setup every command shares."""

    def __init__(self, settings: MovingSettings) -> None:
        self.settings = settings
        configure_logging(
            debug=settings.debug,
            log_json=settings.log_json,
            service_name=settings.service_name,
        )

    def with_overrides(self, **sections: dict[str, object]) -> MovingSettings:
        """Settings with per-section fields replaced, e.g. ``grpc={"port": 1}``."""
        update = {}
        for name, values in sections.items():
            values = {key: value for key, value in values.items() if value is not None}
            if values:
                update[name] = getattr(self.settings, name).model_copy(update=values)
        if not update:
            return self.settings
        return self.settings.model_copy(update=update)
