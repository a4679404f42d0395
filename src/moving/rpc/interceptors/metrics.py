"""Request metrics: a duration histogram and an error counter per method.

Collectors are process-wide. :func:`get_or_create` memoizes them per
registry and name, so building a second chain (tests, reloads) reuses the
registered collectors instead of failing on duplicate registration.
"""

from __future__ import annotations

import threading
import time
import weakref
from collections.abc import Callable
from typing import TYPE_CHECKING

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from moving.rpc.errors import status_code_of
from moving.rpc.interceptors.base import CallContext, CallNext, Interceptor

if TYPE_CHECKING:
    from google.protobuf.message import Message
    from prometheus_client.metrics import MetricWrapperBase

LABELS = ("service", "subsystem", "method", "code")
DURATION_BUCKETS = (0.005, 0.01, 0.05, 0.1, 0.5, 1, 5, 10, 15, 20, 25, 30, 60, 90)

_collectors: weakref.WeakKeyDictionary[CollectorRegistry, dict[str, MetricWrapperBase]] = (
    weakref.WeakKeyDictionary()
)
_collectors_lock = threading.Lock()


def get_or_create[M: MetricWrapperBase](
    registry: CollectorRegistry, name: str, factory: Callable[[], M]
) -> M:
    """Return the collector registered as *name* on *registry*, creating it once."""
    with _collectors_lock:
        known = _collectors.setdefault(registry, {})
        collector = known.get(name)
        if collector is None:
            collector = factory()
            known[name] = collector
    return collector  # type: ignore[return-value]


def metric_namespace(service_name: str) -> str:
    return service_name.replace("-", "_")


class MetricsInterceptor(Interceptor):
    """Records ``responses_duration_seconds`` and ``error_requests_count``.

    Disabled, it is a plain pass-through and registers nothing.
    """

    def __init__(
        self,
        *,
        enabled: bool,
        service_name: str,
        registry: CollectorRegistry = REGISTRY,
    ) -> None:
        self.enabled = enabled
        self._service = metric_namespace(service_name)
        if not enabled:
            return
        self._durations = get_or_create(
            registry,
            "responses_duration_seconds",
            lambda: Histogram(
                "responses_duration_seconds",
                "Response time by method and error code.",
                LABELS,
                buckets=DURATION_BUCKETS,
                registry=registry,
            ),
        )
        self._errors = get_or_create(
            registry,
            "error_requests_count",
            lambda: Counter(
                "error_requests_count",
                "Error requests count by method and error code.",
                LABELS,
                registry=registry,
            ),
        )

    def invoke(self, ctx: CallContext, request: Message, call_next: CallNext) -> Message:
        if not self.enabled:
            return call_next(ctx, request)

        start = time.perf_counter()
        failure: BaseException | None = None
        try:
            return call_next(ctx, request)
        except Exception as exc:
            failure = exc
            raise
        finally:
            code = status_code_of(failure).name
            labels = (self._service, ctx.protocol, ctx.method, code)
            if failure is not None:
                self._errors.labels(*labels).inc()
            self._durations.labels(*labels).observe(time.perf_counter() - start)
