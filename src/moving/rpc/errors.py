"""Structured RPC errors.

Every failure that reaches the transport boundary is an :class:`RpcError`
carrying a gRPC status code, a machine-readable reason and a domain tag.
Over gRPC it becomes a ``google.rpc.Status`` with an ``ErrorInfo`` detail;
over the JSON gateway it becomes an HTTP status plus a JSON body of the
same shape.
"""

from __future__ import annotations

from typing import Any, NoReturn

import grpc
from google.protobuf import any_pb2
from google.rpc import error_details_pb2, status_pb2
from grpc_status import rpc_status

from moving.services.result import ErrorCode, ServiceError

ERROR_DOMAIN = "mattis.dev"

# Reasons
VALIDATION_FAILED = "VALIDATION_FAILED"
UNAUTHENTICATED = "UNAUTHENTICATED"
NOT_FOUND = "NOT_FOUND"
UNKNOWN = "UNKNOWN"
PANIC_HANDLED = "PANIC_HANDLED"

_HTTP_STATUS: dict[grpc.StatusCode, int] = {
    grpc.StatusCode.OK: 200,
    grpc.StatusCode.INVALID_ARGUMENT: 400,
    grpc.StatusCode.FAILED_PRECONDITION: 400,
    grpc.StatusCode.OUT_OF_RANGE: 400,
    grpc.StatusCode.UNAUTHENTICATED: 401,
    grpc.StatusCode.PERMISSION_DENIED: 403,
    grpc.StatusCode.NOT_FOUND: 404,
    grpc.StatusCode.ALREADY_EXISTS: 409,
    grpc.StatusCode.ABORTED: 409,
    grpc.StatusCode.RESOURCE_EXHAUSTED: 429,
    grpc.StatusCode.CANCELLED: 499,
    grpc.StatusCode.UNIMPLEMENTED: 501,
    grpc.StatusCode.UNAVAILABLE: 503,
    grpc.StatusCode.DEADLINE_EXCEEDED: 504,
}

_SERVICE_CODES: dict[ErrorCode, tuple[grpc.StatusCode, str]] = {
    ErrorCode.NOT_FOUND: (grpc.StatusCode.NOT_FOUND, NOT_FOUND),
    ErrorCode.INVALID_ARGUMENT: (grpc.StatusCode.INVALID_ARGUMENT, VALIDATION_FAILED),
    ErrorCode.UNKNOWN: (grpc.StatusCode.UNKNOWN, UNKNOWN),
}


class RpcError(Exception):
    """A failed call with its status code, reason and domain."""

    def __init__(
        self,
        code: grpc.StatusCode,
        reason: str,
        message: str,
        *,
        domain: str = ERROR_DOMAIN,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.reason = reason
        self.message = message
        self.domain = domain

    def __repr__(self) -> str:
        return f"RpcError({self.code.name}, {self.reason!r}, {self.message!r})"

    # ── Constructors ─────────────────────────────────────────────────

    @classmethod
    def validation(cls, message: str) -> RpcError:
        return cls(grpc.StatusCode.INVALID_ARGUMENT, VALIDATION_FAILED, message)

    @classmethod
    def unauthenticated(cls, message: str) -> RpcError:
        return cls(grpc.StatusCode.UNAUTHENTICATED, UNAUTHENTICATED, message)

    @classmethod
    def panic_handled(cls) -> RpcError:
        return cls(grpc.StatusCode.UNKNOWN, PANIC_HANDLED, "panic handled")

    @classmethod
    def from_service_error(cls, error: ServiceError) -> RpcError:
        code, reason = _SERVICE_CODES.get(error.code, (grpc.StatusCode.UNKNOWN, UNKNOWN))
        return cls(code, reason, error.message)

    # ── Renderings ───────────────────────────────────────────────────

    @property
    def status_message(self) -> str:
        return f"error: {self.message}"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS.get(self.code, 500)

    def error_info(self) -> error_details_pb2.ErrorInfo:
        return error_details_pb2.ErrorInfo(reason=self.reason, domain=self.domain)

    def to_status(self) -> grpc.Status:
        """The gRPC status, with the ErrorInfo packed into its details."""
        detail = any_pb2.Any()
        detail.Pack(self.error_info())
        return rpc_status.to_status(
            status_pb2.Status(
                code=self.code.value[0],
                message=self.status_message,
                details=[detail],
            )
        )

    def abort(self, context: grpc.ServicerContext) -> NoReturn:
        """Terminate the current gRPC call with this error."""
        context.abort_with_status(self.to_status())
        raise AssertionError("abort_with_status returned")  # pragma: no cover

    def to_json(self) -> dict[str, Any]:
        """Gateway error body, in the layout grpc-gateway clients expect."""
        return {
            "code": self.code.value[0],
            "message": self.status_message,
            "details": [
                {
                    "@type": f"type.googleapis.com/{error_details_pb2.ErrorInfo.DESCRIPTOR.full_name}",
                    "reason": self.reason,
                    "domain": self.domain,
                }
            ],
        }


def status_code_of(exc: BaseException | None) -> grpc.StatusCode:
    """Status a call ends with: OK, the RpcError's code, or UNKNOWN."""
    if exc is None:
        return grpc.StatusCode.OK
    if isinstance(exc, RpcError):
        return exc.code
    return grpc.StatusCode.UNKNOWN
