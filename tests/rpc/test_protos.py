"""Tests for the runtime-built moving.v1 descriptors."""

from __future__ import annotations

from google.protobuf import descriptor_pool, json_format

from moving.rpc import protos


class TestDescriptors:
    def test_registered_in_default_pool(self) -> None:
        service = descriptor_pool.Default().FindServiceByName(protos.SERVICE_NAME)
        assert [m.name for m in service.methods] == [
            "CreateOrder",
            "ListOrders",
            "GetOrder",
            "UpdateOrder",
            "ListReviews",
        ]

    def test_update_returns_empty_and_reviews_take_empty(self) -> None:
        methods = protos.SERVICE_DESCRIPTOR.methods_by_name
        assert methods["UpdateOrder"].output_type.full_name == "google.protobuf.Empty"
        assert methods["ListReviews"].input_type.full_name == "google.protobuf.Empty"

    def test_method_specs(self) -> None:
        spec = protos.METHODS["GetOrder"]
        assert spec.full_method == "/moving.v1.MovingService/GetOrder"
        assert spec.request_type is protos.GetOrderRequest
        assert spec.response_type is protos.GetOrderResponse


class TestPresence:
    def test_optional_fields_track_presence(self) -> None:
        order = protos.Order()
        assert not order.HasField("name")
        order.name = ""
        assert order.HasField("name")

    def test_enum_values(self) -> None:
        request = protos.UpdateOrderRequest(order_status=4, property_size=6)
        data = json_format.MessageToDict(request, preserving_proto_field_name=True)
        assert data == {
            "order_status": "ORDER_STATUS_DONE",
            "property_size": "PROPERTY_SIZE_COMMERCIAL",
        }


class TestBuildMessage:
    def test_skips_none(self) -> None:
        message = protos.build_message(protos.Order, id=3, name=None, email="a@b.co")
        assert message.id == 3
        assert not message.HasField("name")
        assert message.email == "a@b.co"

    def test_copies_submessages_and_lists(self) -> None:
        ts = protos.Timestamp(seconds=60)
        order = protos.build_message(protos.Order, id=1, created_at=ts)
        assert order.created_at.seconds == 60
        listing = protos.build_message(protos.ListOrdersResponse, orders=[order, order])
        assert len(listing.orders) == 2

    def test_json_round_trip_of_uint64(self) -> None:
        data = json_format.MessageToDict(protos.GetOrderRequest(id=12))
        assert data == {"id": "12"}
        parsed = json_format.ParseDict({"id": 12}, protos.GetOrderRequest())
        assert parsed.id == 12
