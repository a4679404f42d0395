"""Tests for PluginManager registration, blocking and discovery."""

from __future__ import annotations

from typing import Any

from moving.plugins.hookspecs import hookimpl
from moving.plugins.manager import PluginManager


class _Plugin:
    def __init__(self) -> None:
        self.seen: list[Any] = []

    @hookimpl
    def post_create_order(self, order: Any) -> None:
        self.seen.append(order)


class TestPluginManager:
    def test_register_by_name(self) -> None:
        pm = PluginManager()
        assert pm.register_plugin(_Plugin(), name="sample")
        assert "sample" in pm.list_plugin_names()

    def test_default_name_is_class_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_Plugin())
        assert pm.list_plugin_names() == ["_Plugin"]

    def test_names_sorted(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_Plugin(), name="zeta")
        pm.register_plugin(_Plugin(), name="alpha")
        assert pm.list_plugin_names() == ["alpha", "zeta"]

    def test_unregister(self) -> None:
        pm = PluginManager()
        plugin = _Plugin()
        pm.register_plugin(plugin)
        pm.unregister(plugin)
        assert pm.get_plugins() == []

    def test_disabled_name_is_not_registered(self) -> None:
        pm = PluginManager(disabled=["telegram"])
        plugin = _Plugin()
        assert pm.is_blocked("telegram")
        assert not pm.register_plugin(plugin, name="telegram")
        assert pm.get_plugins() == []
        pm.hook.post_create_order(order="x")
        assert plugin.seen == []

    def test_discover_and_load(self) -> None:
        pm = PluginManager()
        assert not pm.is_loaded
        pm.register_plugin(_Plugin(), name="builtin")
        names = pm.discover_and_load()
        assert pm.is_loaded
        assert "builtin" in names

    def test_hook_dispatch(self) -> None:
        pm = PluginManager()
        plugin = _Plugin()
        pm.register_plugin(plugin)
        pm.hook.post_create_order(order="order-1")
        assert plugin.seen == ["order-1"]
