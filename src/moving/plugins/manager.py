"""Plugin registry for order-lifecycle hooks.

Built-in plugins are registered by name at startup; third-party ones come
from the ``moving.plugins`` entry-point group. Names listed in
``[plugins] disabled`` are blocked before either happens, so a blocked
plugin is never registered at all.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable

import pluggy

from moving.plugins.hookspecs import PROJECT_NAME, MovingHookSpec

ENTRY_POINT_GROUP = "moving.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Thin wrapper over :class:`pluggy.PluginManager` with name blocking."""

    def __init__(self, *, disabled: Iterable[str] = ()) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(MovingHookSpec)
        self._loaded = False
        for name in disabled:
            self._pm.set_blocked(name)

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    @property
    def is_loaded(self) -> bool:
        """True once :meth:`discover_and_load` has run."""
        return self._loaded

    def is_blocked(self, name: str) -> bool:
        return self._pm.is_blocked(name)

    def register_plugin(self, plugin: object, name: str | None = None) -> bool:
        """Register *plugin*; returns False when its name is disabled."""
        resolved = name or type(plugin).__name__
        if self._pm.is_blocked(resolved):
            logger.info("Plugin %s is disabled; not registering", resolved)
            return False
        self._pm.register(plugin, name=resolved)
        logger.debug("Registered plugin %s", resolved)
        return True

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def discover_and_load(self) -> list[str]:
        """Load entry-point plugins; return the names of everything registered.

        An entry point may expose a plugin class instead of an instance;
        such classes are instantiated with no arguments, and a class that
        cannot be built is dropped with a warning.
        """
        found = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        for plugin in [p for p in self._pm.get_plugins() if inspect.isclass(p)]:
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Dropping plugin %s: could not instantiate", name, exc_info=True)
                continue
            self._pm.register(instance, name=name)
        self._loaded = True
        names = self.list_plugin_names()
        logger.info("Loaded %d entry-point plugin(s); active: %s", found, ", ".join(names) or "none")
        return names

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return sorted(
            self._pm.get_name(plugin) or type(plugin).__name__
            for plugin in self._pm.get_plugins()
        )
