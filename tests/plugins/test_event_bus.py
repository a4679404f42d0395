"""Tests for EventBus: off-thread pluggy dispatch."""

from __future__ import annotations

import threading
from typing import Any

import pytest

from moving.plugins.event_bus import EventBus
from moving.plugins.hookspecs import hookimpl
from moving.plugins.manager import PluginManager


class RecordingPlugin:
    def __init__(self) -> None:
        self.calls: list[Any] = []
        self.threads: list[str] = []

    @hookimpl
    def post_create_order(self, order: Any) -> None:
        self.calls.append(order)
        self.threads.append(threading.current_thread().name)


class FailingPlugin:
    @hookimpl
    def post_create_order(self, order: Any) -> None:
        raise RuntimeError("plugin exploded")


@pytest.fixture
def plugin_manager() -> PluginManager:
    return PluginManager()


class TestSyncDispatch:
    def test_runs_on_calling_thread(self, plugin_manager: PluginManager) -> None:
        plugin = RecordingPlugin()
        plugin_manager.register_plugin(plugin)
        EventBus(plugin_manager, sync=True).dispatch("post_create_order", {"order": 1})
        assert plugin.calls == [1]
        assert plugin.threads == [threading.current_thread().name]

    def test_failures_are_swallowed(self, plugin_manager: PluginManager) -> None:
        plugin_manager.register_plugin(FailingPlugin())
        EventBus(plugin_manager, sync=True).dispatch("post_create_order", {"order": 1})

    def test_unknown_hook_is_ignored(self, plugin_manager: PluginManager) -> None:
        EventBus(plugin_manager, sync=True).dispatch("post_nothing", {})


class TestAsyncDispatch:
    def test_runs_off_thread(self, plugin_manager: PluginManager) -> None:
        plugin = RecordingPlugin()
        plugin_manager.register_plugin(plugin)
        bus = EventBus(plugin_manager)
        try:
            bus.dispatch("post_create_order", {"order": 7})
            bus.wait(timeout=5)
        finally:
            bus.shutdown()
        assert plugin.calls == [7]
        assert plugin.threads[0].startswith("moving-events")

    def test_shutdown_drains_pending(self, plugin_manager: PluginManager) -> None:
        plugin = RecordingPlugin()
        plugin_manager.register_plugin(plugin)
        bus = EventBus(plugin_manager)
        for i in range(5):
            bus.dispatch("post_create_order", {"order": i})
        bus.shutdown()
        assert sorted(plugin.calls) == [0, 1, 2, 3, 4]

    def test_dispatch_after_shutdown_raises(self, plugin_manager: PluginManager) -> None:
        bus = EventBus(plugin_manager)
        bus.shutdown()
        with pytest.raises(RuntimeError, match="shut down"):
            bus.dispatch("post_create_order", {"order": 1})

    def test_failures_do_not_reach_caller(self, plugin_manager: PluginManager) -> None:
        plugin_manager.register_plugin(FailingPlugin())
        bus = EventBus(plugin_manager)
        bus.dispatch("post_create_order", {"order": 1})
        bus.wait(timeout=5)
        bus.shutdown()
