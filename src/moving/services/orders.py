"""OrderService: create, list, get and update orders.

Pass-through orchestration over :class:`OrderRepository`: storage DTOs in
and out, storage exceptions translated into ``ServiceResult`` error codes.
There are no status-transition rules; any status may follow any other.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from moving.infrastructure.repositories.errors import RepositoryError
from moving.infrastructure.repositories.orders import (
    NewOrder,
    OrderFilter,
    OrderPatch,
    OrderRepository,
    OrderRow,
)
from moving.services._helpers import storage_failure
from moving.services.base import BaseService
from moving.services.contracts import (
    Order,
    OrderChanges,
    OrderData,
    OrderDraft,
    OrderListData,
    OrderQuery,
    dump_validated,
)
from moving.services.result import ServiceResult
from moving.services.telemetry import traced

if TYPE_CHECKING:
    from moving.plugins.event_bus import EventBus


class OrderService(BaseService):
    """Order lifecycle operations."""

    def __init__(self, orders: OrderRepository, *, event_bus: EventBus | None = None) -> None:
        super().__init__(event_bus=event_bus)
        self._orders = orders

    @traced
    def create_order(self, draft: OrderDraft) -> ServiceResult:
        """Store a new order with status ``created`` and notify subscribers."""
        op = "create_order"
        try:
            row = self._orders.create_order(NewOrder(**draft.model_dump()))
        except RepositoryError as exc:
            return storage_failure(op, "create order", exc)

        order = _to_order(row)
        warnings: list[str] = []
        self._dispatch_event("post_create_order", {"order": order}, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(OrderData, {"order": order}),
            warnings=warnings,
        )

    @traced
    def list_orders(self, query: OrderQuery | None = None) -> ServiceResult:
        """Orders newest first. An empty or absent query returns every order."""
        op = "list_orders"
        try:
            rows = self._orders.list_orders(_to_filter(query))
        except RepositoryError as exc:
            return storage_failure(op, "get all orders", exc)

        items = [_to_order(row) for row in rows]
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(OrderListData, {"count": len(items), "items": items}),
        )

    @traced
    def get_order(self, order_id: int) -> ServiceResult:
        op = "get_order"
        try:
            row = self._orders.get_order(order_id)
        except RepositoryError as exc:
            return storage_failure(op, "get order by id", exc)

        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(OrderData, {"order": _to_order(row)}),
        )

    @traced
    def update_order(self, changes: OrderChanges) -> ServiceResult:
        """Apply a sparse update. Unsupplied fields keep their stored values."""
        op = "update_order"
        try:
            self._orders.update_order(OrderPatch(**changes.model_dump()))
        except RepositoryError as exc:
            return storage_failure(op, "update order", exc)

        return ServiceResult(ok=True, op=op, data={"id": changes.id})


def _to_filter(query: OrderQuery | None) -> OrderFilter | None:
    if query is None or query.is_empty:
        return None
    return OrderFilter(**query.model_dump())


def _to_order(row: OrderRow) -> Order:
    return Order(
        id=row.id,
        name=row.name,
        email=row.email,
        phone=row.phone,
        move_date=row.move_date,
        move_from=row.move_from,
        move_to=row.move_to,
        property_size=row.property_size,
        order_status=row.order_status,
        additional_info=row.additional_info,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
