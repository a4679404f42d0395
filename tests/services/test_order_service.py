"""Tests for OrderService: ServiceResult contract and error translation."""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy.engine import Engine

from moving.domain.types import OrderStatus, PropertySize
from moving.infrastructure.repositories import OrderRepository
from moving.plugins.event_bus import EventBus
from moving.plugins.hookspecs import hookimpl
from moving.plugins.manager import PluginManager
from moving.services.contracts import Order, OrderChanges, OrderDraft, OrderQuery
from moving.services.orders import OrderService
from moving.services.result import ErrorCode


def _draft(**overrides: Any) -> OrderDraft:
    values: dict[str, Any] = {
        "name": "Ann Lee",
        "phone": "+1 415 555 0100",
        "move_date": date(2026, 5, 1),
        "move_from": "12 Oak St",
        "move_to": "7 Elm Ave",
        "property_size": PropertySize.TWO_BEDROOMS,
    }
    values.update(overrides)
    return OrderDraft(**values)


class RecordingPlugin:
    def __init__(self) -> None:
        self.orders: list[Order] = []

    @hookimpl
    def post_create_order(self, order: Order) -> None:
        self.orders.append(order)


class BrokenBus:
    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> None:
        raise RuntimeError("event bus is shut down")


class TestCreateOrder:
    def test_create_scenario(self, order_service: OrderService) -> None:
        result = order_service.create_order(_draft())
        assert result.ok
        assert result.op == "create_order"
        order = result.data["order"]
        assert order["id"] > 0
        assert order["order_status"] is OrderStatus.CREATED
        assert order["property_size"] is PropertySize.TWO_BEDROOMS
        assert order["created_at"] == order["updated_at"]

    def test_dispatches_post_create_order(self, order_repo: OrderRepository) -> None:
        pm = PluginManager()
        plugin = RecordingPlugin()
        pm.register_plugin(plugin)
        svc = OrderService(order_repo, event_bus=EventBus(pm, sync=True))

        result = svc.create_order(_draft(email="ann@example.com"))
        assert result.ok
        assert len(plugin.orders) == 1
        assert plugin.orders[0].id == result.data["order"]["id"]
        assert plugin.orders[0].email == "ann@example.com"

    def test_dispatch_failure_is_a_warning(self, order_repo: OrderRepository) -> None:
        svc = OrderService(order_repo, event_bus=BrokenBus())  # type: ignore[arg-type]
        result = svc.create_order(_draft())
        assert result.ok
        assert result.warnings == ["Event dispatch failed for post_create_order"]

    def test_store_failure_is_unknown(self, db_engine: Engine) -> None:
        svc = OrderService(OrderRepository(db_engine))
        with db_engine.begin() as conn:
            conn.exec_driver_sql("DROP TABLE orders")
        result = svc.create_order(_draft())
        assert not result.ok
        assert result.error is not None
        assert result.error.code is ErrorCode.UNKNOWN
        assert result.error.message.startswith("failed to create order | failed to insert order | ")


class TestListOrders:
    def test_empty_is_not_found(self, order_service: OrderService) -> None:
        result = order_service.list_orders()
        assert not result.ok
        assert result.error is not None
        assert result.error.code is ErrorCode.NOT_FOUND

    def test_empty_query_returns_all(self, order_service: OrderService) -> None:
        for name in ("a", "b"):
            order_service.create_order(_draft(name=name))
        result = order_service.list_orders(OrderQuery())
        assert result.ok
        assert result.data["count"] == 2
        assert [item["name"] for item in result.data["items"]] == ["b", "a"]

    def test_query_narrows(self, order_service: OrderService) -> None:
        order_service.create_order(_draft(property_size=PropertySize.STUDIO))
        order_service.create_order(_draft(property_size=PropertySize.COMMERCIAL))
        result = order_service.list_orders(OrderQuery(property_size=PropertySize.STUDIO))
        assert result.data["count"] == 1


class TestGetOrder:
    def test_found(self, order_service: OrderService) -> None:
        created = order_service.create_order(_draft()).data["order"]
        result = order_service.get_order(created["id"])
        assert result.ok
        assert result.data["order"] == created

    def test_missing_is_not_found(self, order_service: OrderService) -> None:
        result = order_service.get_order(999)
        assert not result.ok
        assert result.error is not None
        assert result.error.code is ErrorCode.NOT_FOUND


class TestUpdateOrder:
    def test_any_status_transition_allowed(self, order_service: OrderService) -> None:
        order_id = order_service.create_order(_draft()).data["order"]["id"]
        for status in (OrderStatus.DONE, OrderStatus.CREATED, OrderStatus.REJECTED):
            result = order_service.update_order(OrderChanges(id=order_id, order_status=status))
            assert result.ok
            assert result.data == {"id": order_id}
        assert order_service.get_order(order_id).data["order"]["order_status"] is (
            OrderStatus.REJECTED
        )

    def test_zero_id_is_invalid_argument(self, order_service: OrderService) -> None:
        result = order_service.update_order(OrderChanges(id=0, name="x"))
        assert result.error is not None
        assert result.error.code is ErrorCode.INVALID_ARGUMENT
        assert result.error.message == "failed to update order | invalid id"

    def test_no_fields_is_invalid_argument(self, order_service: OrderService) -> None:
        order_id = order_service.create_order(_draft()).data["order"]["id"]
        result = order_service.update_order(OrderChanges(id=order_id))
        assert result.error is not None
        assert result.error.code is ErrorCode.INVALID_ARGUMENT

    def test_missing_is_not_found(self, order_service: OrderService) -> None:
        result = order_service.update_order(OrderChanges(id=77, name="x"))
        assert result.error is not None
        assert result.error.code is ErrorCode.NOT_FOUND
