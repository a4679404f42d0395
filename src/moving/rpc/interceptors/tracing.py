"""Per-call tracing: one root span named after the full method."""

from __future__ import annotations

from typing import TYPE_CHECKING

from moving.rpc.errors import status_code_of
from moving.rpc.interceptors.base import CallContext, CallNext, Interceptor

if TYPE_CHECKING:
    from google.protobuf.message import Message

    from moving.services.telemetry import Tracer


class TracingInterceptor(Interceptor):
    """Opens a span tagged ``product=<service>`` and records the outcome.

    Service spans created by ``@traced`` nest under it.
    """

    def __init__(self, tracer: Tracer, service_name: str) -> None:
        self._tracer = tracer
        self._service_name = service_name

    def invoke(self, ctx: CallContext, request: Message, call_next: CallNext) -> Message:
        with self._tracer.start_span(ctx.full_method, product=self._service_name) as span:
            try:
                response = call_next(ctx, request)
            except Exception as exc:
                if span is not None:
                    span.set_attribute("rpc.code", status_code_of(exc).name)
                raise
            if span is not None:
                span.set_attribute("rpc.code", "OK")
            return response
