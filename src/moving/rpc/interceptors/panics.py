"""Fault containment: no single call's exception takes the process down."""

from __future__ import annotations

import traceback
from typing import TYPE_CHECKING, Any

import structlog
from prometheus_client import REGISTRY, CollectorRegistry, Counter

from moving.rpc.errors import RpcError
from moving.rpc.interceptors.base import CallContext, CallNext, Interceptor
from moving.rpc.interceptors.metrics import get_or_create, metric_namespace

if TYPE_CHECKING:
    from google.protobuf.message import Message


class PanicInterceptor(Interceptor):
    """Converts any non-RPC exception into a ``PANIC_HANDLED`` error.

    The stack is logged and ``<service>_grpc_panics_count{method}`` is
    incremented. :class:`RpcError` passes through untouched.
    """

    def __init__(
        self,
        service_name: str,
        *,
        registry: CollectorRegistry = REGISTRY,
        logger: Any = None,
    ) -> None:
        self._log = logger or structlog.get_logger("moving.rpc").bind(type="unary")
        namespace = metric_namespace(service_name)
        self._panics = get_or_create(
            registry,
            f"{namespace}_grpc_panics_count",
            lambda: Counter(
                "panics_count",
                "Panics count by method.",
                ("method",),
                namespace=namespace,
                subsystem="grpc",
                registry=registry,
            ),
        )

    def invoke(self, ctx: CallContext, request: Message, call_next: CallNext) -> Message:
        try:
            return call_next(ctx, request)
        except RpcError:
            raise
        except Exception:
            self._log.warning("panic: " + traceback.format_exc(), method=ctx.full_method)
            self._panics.labels(ctx.method).inc()
            raise RpcError.panic_handled() from None
