"""One structured log line per call."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog
from google.protobuf import json_format

from moving.rpc.errors import status_code_of
from moving.rpc.interceptors.base import CallContext, CallNext, Interceptor
from moving.services.telemetry import get_current_span

if TYPE_CHECKING:
    from google.protobuf.message import Message


def _payload(message: Message | None) -> dict[str, Any] | None:
    if message is None:
        return None
    return json_format.MessageToDict(message, preserving_proto_field_name=True)


class LoggingInterceptor(Interceptor):
    """Logs method, protocol, duration and status.

    The active trace id is attached when a span exists; request and
    response payloads only in debug mode.
    """

    def __init__(self, *, debug: bool = False, logger: Any = None) -> None:
        self._debug = debug
        self._log = logger or structlog.get_logger("moving.rpc").bind(type="unary")

    def invoke(self, ctx: CallContext, request: Message, call_next: CallNext) -> Message:
        span = get_current_span()
        start = time.perf_counter()
        response: Message | None = None
        failure: BaseException | None = None
        try:
            response = call_next(ctx, request)
            return response
        except Exception as exc:
            failure = exc
            raise
        finally:
            fields: dict[str, Any] = {
                "method": ctx.full_method,
                "protocol": ctx.protocol,
                "duration_ms": round((time.perf_counter() - start) * 1000, 3),
                "status": status_code_of(failure).name,
            }
            if span is not None:
                fields["trace_id"] = span.trace_id
            if failure is not None:
                fields["error"] = str(failure)
            if self._debug:
                fields["request"] = _payload(request)
                fields["response"] = _payload(response)
            self._log.info("incoming request", **fields)
