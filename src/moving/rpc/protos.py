"""Protobuf schema for ``moving.v1``, built at import time.

The file descriptor is assembled from ``descriptor_pb2`` and added to the
default descriptor pool, so server reflection and ``json_format`` see it
exactly as if it had been compiled by ``protoc``. Message classes are
obtained from :func:`message_factory.GetMessageClass`.

Fields marked optional use proto3 explicit presence (a synthetic oneof per
field), which lets the transport tell "unset" from "explicit zero".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from google.protobuf import (
    descriptor_pb2,
    descriptor_pool,
    empty_pb2,
    message_factory,
    timestamp_pb2,
)
from google.protobuf.message import Message

PACKAGE = "moving.v1"
FILE_NAME = "moving/v1/moving.proto"
SERVICE_NAME = f"{PACKAGE}.MovingService"

_F = descriptor_pb2.FieldDescriptorProto

_TIMESTAMP = "." + timestamp_pb2.Timestamp.DESCRIPTOR.full_name
_EMPTY = "." + empty_pb2.Empty.DESCRIPTOR.full_name
_PROPERTY_SIZE = f".{PACKAGE}.PropertySize"
_ORDER_STATUS = f".{PACKAGE}.OrderStatus"
_ORDER = f".{PACKAGE}.Order"
_REVIEW = f".{PACKAGE}.Review"
_FILTER = f".{PACKAGE}.OrderFilter"

_SCALARS = {
    "uint64": _F.TYPE_UINT64,
    "int32": _F.TYPE_INT32,
    "string": _F.TYPE_STRING,
}
_ENUMS = {_PROPERTY_SIZE, _ORDER_STATUS}

# (field name, type, flags); flags: "optional", "repeated" or "".
_FieldSpec = tuple[str, str, str]


def _json_name(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _add_enum(file: descriptor_pb2.FileDescriptorProto, name: str, values: list[str]) -> None:
    enum = file.enum_type.add(name=name)
    for number, value in enumerate(values):
        enum.value.add(name=value, number=number)


def _add_message(
    file: descriptor_pb2.FileDescriptorProto, name: str, fields: list[_FieldSpec]
) -> None:
    message = file.message_type.add(name=name)
    for number, (field_name, type_name, flags) in enumerate(fields, start=1):
        field = message.field.add(
            name=field_name,
            number=number,
            json_name=_json_name(field_name),
            label=_F.LABEL_REPEATED if flags == "repeated" else _F.LABEL_OPTIONAL,
        )
        if type_name in _SCALARS:
            field.type = _SCALARS[type_name]
        else:
            field.type = _F.TYPE_ENUM if type_name in _ENUMS else _F.TYPE_MESSAGE
            field.type_name = type_name
        if flags == "optional":
            field.proto3_optional = True
            field.oneof_index = len(message.oneof_decl)
            message.oneof_decl.add(name=f"_{field_name}")


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file = descriptor_pb2.FileDescriptorProto(
        name=FILE_NAME,
        package=PACKAGE,
        syntax="proto3",
        dependency=[
            timestamp_pb2.DESCRIPTOR.name,
            empty_pb2.DESCRIPTOR.name,
        ],
    )

    _add_enum(
        file,
        "PropertySize",
        [
            "PROPERTY_SIZE_UNKNOWN",
            "PROPERTY_SIZE_STUDIO",
            "PROPERTY_SIZE_ONE_BEDROOM",
            "PROPERTY_SIZE_TWO_BEDROOMS",
            "PROPERTY_SIZE_THREE_BEDROOMS",
            "PROPERTY_SIZE_FOUR_PLUS_BEDROOMS",
            "PROPERTY_SIZE_COMMERCIAL",
        ],
    )
    _add_enum(
        file,
        "OrderStatus",
        [
            "ORDER_STATUS_UNKNOWN",
            "ORDER_STATUS_CREATED",
            "ORDER_STATUS_REJECTED",
            "ORDER_STATUS_IN_PROGRESS",
            "ORDER_STATUS_DONE",
        ],
    )

    _add_message(
        file,
        "Order",
        [
            ("id", "uint64", ""),
            ("property_size", _PROPERTY_SIZE, "optional"),
            ("order_status", _ORDER_STATUS, "optional"),
            ("move_date", _TIMESTAMP, ""),
            ("name", "string", "optional"),
            ("email", "string", "optional"),
            ("phone", "string", "optional"),
            ("move_from", "string", "optional"),
            ("move_to", "string", "optional"),
            ("additional_info", "string", "optional"),
            ("created_at", _TIMESTAMP, ""),
            ("updated_at", _TIMESTAMP, ""),
        ],
    )
    _add_message(
        file,
        "CreateOrderRequest",
        [
            ("property_size", _PROPERTY_SIZE, "optional"),
            ("move_date", _TIMESTAMP, ""),
            ("name", "string", "optional"),
            ("email", "string", "optional"),
            ("phone", "string", "optional"),
            ("move_from", "string", "optional"),
            ("move_to", "string", "optional"),
            ("additional_info", "string", "optional"),
        ],
    )
    _add_message(file, "CreateOrderResponse", [("order", _ORDER, "")])
    _add_message(
        file,
        "OrderFilter",
        [
            ("order_status", _ORDER_STATUS, "optional"),
            ("property_size", _PROPERTY_SIZE, "optional"),
            ("created_from", _TIMESTAMP, ""),
            ("created_to", _TIMESTAMP, ""),
            ("move_date_from", _TIMESTAMP, ""),
            ("move_date_to", _TIMESTAMP, ""),
        ],
    )
    _add_message(file, "ListOrdersRequest", [("filter", _FILTER, "")])
    _add_message(file, "ListOrdersResponse", [("orders", _ORDER, "repeated")])
    _add_message(file, "GetOrderRequest", [("id", "uint64", "")])
    _add_message(file, "GetOrderResponse", [("order", _ORDER, "")])
    _add_message(
        file,
        "UpdateOrderRequest",
        [
            ("id", "uint64", ""),
            ("property_size", _PROPERTY_SIZE, "optional"),
            ("order_status", _ORDER_STATUS, "optional"),
            ("move_date", _TIMESTAMP, ""),
            ("name", "string", "optional"),
            ("email", "string", "optional"),
            ("phone", "string", "optional"),
            ("move_from", "string", "optional"),
            ("move_to", "string", "optional"),
            ("additional_info", "string", "optional"),
        ],
    )
    _add_message(
        file,
        "Review",
        [
            ("id", "uint64", ""),
            ("name", "string", ""),
            ("rate", "int32", ""),
            ("text", "string", ""),
            ("photo_url", "string", ""),
            ("review_url", "string", ""),
            ("created_at", _TIMESTAMP, ""),
            ("updated_at", _TIMESTAMP, ""),
        ],
    )
    _add_message(file, "ListReviewsResponse", [("reviews", _REVIEW, "repeated")])

    service = file.service.add(name="MovingService")
    for method_name, input_type, output_type in (
        ("CreateOrder", f".{PACKAGE}.CreateOrderRequest", f".{PACKAGE}.CreateOrderResponse"),
        ("ListOrders", f".{PACKAGE}.ListOrdersRequest", f".{PACKAGE}.ListOrdersResponse"),
        ("GetOrder", f".{PACKAGE}.GetOrderRequest", f".{PACKAGE}.GetOrderResponse"),
        ("UpdateOrder", f".{PACKAGE}.UpdateOrderRequest", _EMPTY),
        ("ListReviews", _EMPTY, f".{PACKAGE}.ListReviewsResponse"),
    ):
        service.method.add(name=method_name, input_type=input_type, output_type=output_type)
    return file


_pool = descriptor_pool.Default()
_pool.AddSerializedFile(_build_file().SerializeToString())

DESCRIPTOR = _pool.FindFileByName(FILE_NAME)
SERVICE_DESCRIPTOR = DESCRIPTOR.services_by_name["MovingService"]


def _message_class(name: str) -> type[Message]:
    return message_factory.GetMessageClass(DESCRIPTOR.message_types_by_name[name])


Empty = empty_pb2.Empty
Timestamp = timestamp_pb2.Timestamp

Order = _message_class("Order")
CreateOrderRequest = _message_class("CreateOrderRequest")
CreateOrderResponse = _message_class("CreateOrderResponse")
OrderFilter = _message_class("OrderFilter")
ListOrdersRequest = _message_class("ListOrdersRequest")
ListOrdersResponse = _message_class("ListOrdersResponse")
GetOrderRequest = _message_class("GetOrderRequest")
GetOrderResponse = _message_class("GetOrderResponse")
UpdateOrderRequest = _message_class("UpdateOrderRequest")
Review = _message_class("Review")
ListReviewsResponse = _message_class("ListReviewsResponse")


@dataclass(frozen=True)
class MethodSpec:
    """One unary method of ``MovingService``."""

    name: str
    request_type: type[Message]
    response_type: type[Message]

    @property
    def full_method(self) -> str:
        return f"/{SERVICE_NAME}/{self.name}"


METHODS: dict[str, MethodSpec] = {
    spec.name: spec
    for spec in (
        MethodSpec("CreateOrder", CreateOrderRequest, CreateOrderResponse),
        MethodSpec("ListOrders", ListOrdersRequest, ListOrdersResponse),
        MethodSpec("GetOrder", GetOrderRequest, GetOrderResponse),
        MethodSpec("UpdateOrder", UpdateOrderRequest, Empty),
        MethodSpec("ListReviews", Empty, ListReviewsResponse),
    )
}


def build_message(message_type: type[Message], **fields: Any) -> Message:
    """Construct *message_type*, skipping ``None`` so optional fields stay unset."""
    message = message_type()
    for name, value in fields.items():
        if value is None:
            continue
        if isinstance(value, Message):
            getattr(message, name).CopyFrom(value)
        elif isinstance(value, list):
            getattr(message, name).extend(value)
        else:
            setattr(message, name, value)
    return message
