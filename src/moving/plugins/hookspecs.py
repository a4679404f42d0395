"""Hooks a ``moving`` plugin can implement.

Plugins mark methods with :data:`hookimpl`::

    from moving.plugins.hookspecs import hookimpl

    class AuditPlugin:
        @hookimpl
        def post_create_order(self, order):
            audit_log.write(order.id)

Hooks run on the event bus worker, never on the request path, and a
plugin failure never fails the call that triggered it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from moving.services.contracts import Order

PROJECT_NAME = "moving"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class MovingHookSpec:
    @hookspec
    def post_create_order(self, order: Order) -> None:
        """A new order was stored; *order* carries its assigned id and timestamps."""
