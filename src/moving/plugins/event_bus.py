"""Asynchronous event dispatch via pluggy + ThreadPoolExecutor.

Notifications never run on the request thread: ``dispatch`` submits the
hook call and returns immediately. ``shutdown`` waits for in-flight calls.

INVARIANT: Plugin failures are logged, never raised to the caller.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from threading import Lock
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from moving.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class EventBus:
    """Dispatches lifecycle hooks to registered plugins.

    Parameters:
        plugin_manager: Loaded PluginManager for hook dispatch.
        sync: Run hooks on the calling thread (tests).
        max_workers: ThreadPoolExecutor worker count.
    """

    def __init__(
        self,
        plugin_manager: PluginManager,
        *,
        sync: bool = False,
        max_workers: int = 2,
    ) -> None:
        self._pm = plugin_manager
        self._sync = sync
        self._executor: ThreadPoolExecutor | None = (
            None
            if sync
            else ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="moving-events")
        )
        self._futures: set[Future[None]] = set()
        self._lock = Lock()

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> None:
        """Run *hook_name* with *payload* as keyword arguments, off-thread unless sync."""
        if self._sync:
            self._execute_hook(hook_name, payload)
            return

        if self._executor is None:
            raise RuntimeError("event bus is shut down")
        future = self._executor.submit(self._execute_hook, hook_name, payload)
        with self._lock:
            self._futures.add(future)
        future.add_done_callback(self._forget)

    def wait(self, timeout: float | None = 30) -> None:
        """Block until every in-flight hook call has finished."""
        with self._lock:
            pending = list(self._futures)
        for future in pending:
            future.result(timeout=timeout)

    def shutdown(self) -> None:
        """Wait for pending hook calls, then stop the worker threads."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _forget(self, future: Future[None]) -> None:
        with self._lock:
            self._futures.discard(future)

    def _execute_hook(self, hook_name: str, payload: dict[str, Any]) -> None:
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            return
        try:
            hook_fn(**payload)
        except Exception:
            logger.error("Hook %s failed", hook_name, exc_info=True)
