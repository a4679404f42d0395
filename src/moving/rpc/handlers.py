"""Wire ⇄ service mapping for every ``MovingService`` method.

Each handler flattens the wire request through :func:`none_if_zero`,
validates it, calls the service and maps the result back. A failed
``ServiceResult`` is raised as :class:`RpcError`.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime, time
from typing import TYPE_CHECKING, Any

from google.protobuf.message import Message

from moving.domain.types import OrderStatus, PropertySize
from moving.domain.values import none_if_zero
from moving.rpc import protos
from moving.rpc.errors import RpcError
from moving.rpc.validation import CreateOrderInput, UpdateOrderInput, validate_input
from moving.services.contracts import OrderQuery

if TYPE_CHECKING:
    from moving.rpc.interceptors.base import CallContext
    from moving.services.orders import OrderService
    from moving.services.result import ServiceResult
    from moving.services.reviews import ReviewService

Handler = Callable[["CallContext", Message], Message]


# ── Scalar conversions ───────────────────────────────────────────────


def timestamp_to_datetime(value: protos.Timestamp) -> datetime | None:
    ts = none_if_zero(value)
    if ts is None:
        return None
    return ts.ToDatetime(tzinfo=UTC)


def timestamp_to_date(value: protos.Timestamp) -> date | None:
    moment = timestamp_to_datetime(value)
    return None if moment is None else moment.date()


def to_timestamp(value: date | datetime | None) -> protos.Timestamp | None:
    """Dates become midnight UTC; aware datetimes are converted to UTC."""
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime.combine(value, time(), tzinfo=UTC)
    ts = protos.Timestamp()
    ts.FromDatetime(value)
    return ts


def _enum_or_none(value: int, enum_cls: type[PropertySize] | type[OrderStatus]) -> Any:
    return none_if_zero(enum_cls(value))


def _wire_enum(value: PropertySize | OrderStatus | None) -> int | None:
    value = none_if_zero(value)
    return None if value is None else int(value)


# ── Messages ─────────────────────────────────────────────────────────


def order_to_wire(order: dict[str, Any]) -> Message:
    return protos.build_message(
        protos.Order,
        id=order["id"],
        property_size=_wire_enum(order["property_size"]),
        order_status=_wire_enum(order["order_status"]),
        move_date=to_timestamp(order["move_date"]),
        name=none_if_zero(order["name"]),
        email=none_if_zero(order["email"]),
        phone=none_if_zero(order["phone"]),
        move_from=none_if_zero(order["move_from"]),
        move_to=none_if_zero(order["move_to"]),
        additional_info=none_if_zero(order["additional_info"]),
        created_at=to_timestamp(order["created_at"]),
        updated_at=to_timestamp(order["updated_at"]),
    )


def review_to_wire(review: dict[str, Any]) -> Message:
    return protos.build_message(
        protos.Review,
        id=review["id"],
        name=review["name"],
        rate=review["rate"],
        text=review["text"],
        photo_url=review["photo_url"],
        review_url=review["review_url"],
        created_at=to_timestamp(review["created_at"]),
        updated_at=to_timestamp(review["updated_at"]),
    )


def query_from_wire(request: Message) -> OrderQuery | None:
    """The request's filter, or None when absent or every bound is zero."""
    if not request.HasField("filter"):
        return None
    wire = request.filter
    query = OrderQuery(
        order_status=_enum_or_none(wire.order_status, OrderStatus),
        property_size=_enum_or_none(wire.property_size, PropertySize),
        created_from=timestamp_to_datetime(wire.created_from),
        created_to=timestamp_to_datetime(wire.created_to),
        move_date_from=timestamp_to_date(wire.move_date_from),
        move_date_to=timestamp_to_date(wire.move_date_to),
    )
    return None if query.is_empty else query


def _unwrap(result: ServiceResult) -> dict[str, Any]:
    if not result.ok:
        assert result.error is not None
        raise RpcError.from_service_error(result.error)
    return result.data


# ── Handlers ─────────────────────────────────────────────────────────


class MovingHandlers:
    """Terminal handlers, one per RPC method, keyed by short method name."""

    def __init__(self, orders: OrderService, reviews: ReviewService) -> None:
        self._orders = orders
        self._reviews = reviews

    def routes(self) -> dict[str, Handler]:
        return {
            "CreateOrder": self.create_order,
            "ListOrders": self.list_orders,
            "GetOrder": self.get_order,
            "UpdateOrder": self.update_order,
            "ListReviews": self.list_reviews,
        }

    def create_order(self, ctx: CallContext, request: Message) -> Message:
        payload = validate_input(
            CreateOrderInput,
            {
                "name": none_if_zero(request.name),
                "phone": none_if_zero(request.phone),
                "email": none_if_zero(request.email),
                "move_date": timestamp_to_date(request.move_date),
                "move_from": none_if_zero(request.move_from),
                "move_to": none_if_zero(request.move_to),
                "property_size": _enum_or_none(request.property_size, PropertySize),
                "additional_info": none_if_zero(request.additional_info),
            },
        )
        data = _unwrap(self._orders.create_order(payload.to_draft()))
        return protos.CreateOrderResponse(order=order_to_wire(data["order"]))

    def list_orders(self, ctx: CallContext, request: Message) -> Message:
        data = _unwrap(self._orders.list_orders(query_from_wire(request)))
        return protos.ListOrdersResponse(orders=[order_to_wire(item) for item in data["items"]])

    def get_order(self, ctx: CallContext, request: Message) -> Message:
        data = _unwrap(self._orders.get_order(request.id))
        return protos.GetOrderResponse(order=order_to_wire(data["order"]))

    def update_order(self, ctx: CallContext, request: Message) -> Message:
        payload = validate_input(
            UpdateOrderInput,
            {
                "id": request.id,
                "property_size": _enum_or_none(request.property_size, PropertySize),
                "order_status": _enum_or_none(request.order_status, OrderStatus),
                "move_date": timestamp_to_date(request.move_date),
                "name": none_if_zero(request.name),
                "email": none_if_zero(request.email),
                "phone": none_if_zero(request.phone),
                "move_from": none_if_zero(request.move_from),
                "move_to": none_if_zero(request.move_to),
                "additional_info": none_if_zero(request.additional_info),
            },
        )
        _unwrap(self._orders.update_order(payload.to_changes()))
        return protos.Empty()

    def list_reviews(self, ctx: CallContext, request: Message) -> Message:
        data = _unwrap(self._reviews.list_reviews())
        return protos.ListReviewsResponse(
            reviews=[review_to_wire(item) for item in data["items"]]
        )
