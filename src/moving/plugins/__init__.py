"""Order-lifecycle hooks via pluggy.

Plugin failures are logged, never raised to the caller.
"""

from moving.plugins.event_bus import EventBus
from moving.plugins.hookspecs import hookimpl
from moving.plugins.manager import PluginManager

__all__ = ["EventBus", "PluginManager", "hookimpl"]
