"""BaseService: shared foundation for the moving services.

Services receive their repositories at construction time plus an optional
:class:`EventBus` for order-lifecycle notifications.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from moving.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class OrderService(BaseService):
            def create_order(self, draft: OrderDraft) -> ServiceResult:
                ...
                self._dispatch_event("post_create_order", {"order": order}, warnings)
    """

    def __init__(self, *, event_bus: EventBus | None = None) -> None:
        self._event_bus = event_bus

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a lifecycle event. No-op if no event bus is attached.

        INVARIANT: notification failures are warnings, never errors.
        """
        bus = self._event_bus
        if bus is None:
            return
        try:
            bus.dispatch(hook_name, payload)
        except Exception:
            logger.warning("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
