"""Tests for the shared Dispatcher."""

from __future__ import annotations

import grpc
import pytest

from moving.infrastructure.database.deadlines import remaining
from moving.rpc import protos
from moving.rpc.dispatch import Dispatcher
from moving.rpc.errors import RpcError
from moving.rpc.interceptors import InterceptorChain
from tests.conftest import ADMIN_TOKEN


class TestDispatcher:
    def test_methods(self, dispatcher: Dispatcher) -> None:
        assert dispatcher.methods == sorted(protos.METHODS)

    def test_unknown_method(self, dispatcher: Dispatcher, call_ctx) -> None:
        with pytest.raises(RpcError) as info:
            dispatcher("DeleteOrder", call_ctx(), protos.Empty())
        assert info.value.code is grpc.StatusCode.UNIMPLEMENTED

    def test_full_chain_applies(self, dispatcher: Dispatcher, call_ctx) -> None:
        with pytest.raises(RpcError) as info:
            dispatcher("ListReviews", call_ctx("ListReviews"), protos.Empty())
        assert info.value.code is grpc.StatusCode.UNAUTHENTICATED

    def test_not_found_through_chain(self, dispatcher: Dispatcher, call_ctx) -> None:
        with pytest.raises(RpcError) as info:
            dispatcher("GetOrder", call_ctx("GetOrder", token=ADMIN_TOKEN), protos.GetOrderRequest(id=999))
        assert info.value.code is grpc.StatusCode.NOT_FOUND

    def test_binds_caller_deadline(self, call_ctx) -> None:
        seen: list[float | None] = []

        def handler(ctx, request):  # noqa: ANN001, ANN202
            seen.append(remaining())
            return protos.Empty()

        dispatcher = Dispatcher({"ListReviews": handler}, InterceptorChain([]))
        dispatcher("ListReviews", call_ctx("ListReviews", timeout=2.0), protos.Empty())
        dispatcher("ListReviews", call_ctx("ListReviews"), protos.Empty())
        assert seen[0] is not None and 0 < seen[0] <= 2.0
        assert seen[1] is None
        assert remaining() is None
