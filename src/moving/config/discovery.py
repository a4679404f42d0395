"""Config file discovery.

``moving.toml`` is found by walking up from the working directory. The
``MOVING_CONFIG`` env var pins an explicit file instead; ``serve --config``
overrides both.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "moving.toml"
CONFIG_ENV_VAR = "MOVING_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest moving.toml at or above *start*, or None.

    A set but missing ``MOVING_CONFIG`` path yields None rather than
    falling back to the walk-up.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        pinned = Path(env_path)
        return pinned if pinned.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
