"""Tests for RpcError renderings (gRPC status and gateway JSON)."""

from __future__ import annotations

import grpc
import pytest
from google.rpc import error_details_pb2, status_pb2

from moving.rpc.errors import ERROR_DOMAIN, RpcError, status_code_of
from moving.services.result import ErrorCode, ServiceError


class TestConstructors:
    def test_validation(self) -> None:
        exc = RpcError.validation("phone: bad")
        assert exc.code is grpc.StatusCode.INVALID_ARGUMENT
        assert exc.reason == "VALIDATION_FAILED"
        assert exc.domain == ERROR_DOMAIN == "mattis.dev"

    def test_panic_handled_is_generic(self) -> None:
        exc = RpcError.panic_handled()
        assert exc.code is grpc.StatusCode.UNKNOWN
        assert exc.reason == "PANIC_HANDLED"
        assert exc.message == "panic handled"

    @pytest.mark.parametrize(
        ("code", "status", "reason"),
        [
            (ErrorCode.NOT_FOUND, grpc.StatusCode.NOT_FOUND, "NOT_FOUND"),
            (ErrorCode.INVALID_ARGUMENT, grpc.StatusCode.INVALID_ARGUMENT, "VALIDATION_FAILED"),
            (ErrorCode.UNKNOWN, grpc.StatusCode.UNKNOWN, "UNKNOWN"),
        ],
    )
    def test_from_service_error(
        self, code: ErrorCode, status: grpc.StatusCode, reason: str
    ) -> None:
        exc = RpcError.from_service_error(ServiceError(code=code, message="m"))
        assert exc.code is status
        assert exc.reason == reason
        assert exc.message == "m"


class TestRenderings:
    def test_http_status(self) -> None:
        assert RpcError.unauthenticated("x").http_status == 401
        assert RpcError.validation("x").http_status == 400
        assert RpcError(grpc.StatusCode.NOT_FOUND, "NOT_FOUND", "x").http_status == 404
        assert RpcError.panic_handled().http_status == 500

    def test_to_status_packs_error_info(self) -> None:
        status = RpcError(grpc.StatusCode.NOT_FOUND, "NOT_FOUND", "order 9 not found").to_status()
        assert status.code is grpc.StatusCode.NOT_FOUND
        assert status.details == "error: order 9 not found"

        (key, raw), = status.trailing_metadata
        assert key == "grpc-status-details-bin"
        decoded = status_pb2.Status.FromString(raw)
        info = error_details_pb2.ErrorInfo()
        assert decoded.details[0].Unpack(info)
        assert info.reason == "NOT_FOUND"
        assert info.domain == "mattis.dev"

    def test_to_json(self) -> None:
        body = RpcError.unauthenticated("no auth token provided").to_json()
        assert body == {
            "code": 16,
            "message": "error: no auth token provided",
            "details": [
                {
                    "@type": "type.googleapis.com/google.rpc.ErrorInfo",
                    "reason": "UNAUTHENTICATED",
                    "domain": "mattis.dev",
                }
            ],
        }


class TestStatusCodeOf:
    def test_ok(self) -> None:
        assert status_code_of(None) is grpc.StatusCode.OK

    def test_rpc_error(self) -> None:
        assert status_code_of(RpcError.validation("x")) is grpc.StatusCode.INVALID_ARGUMENT

    def test_other_exception(self) -> None:
        assert status_code_of(ValueError()) is grpc.StatusCode.UNKNOWN
