"""Telemetry primitives: Span, Tracer, @traced, trace_span.

The RPC tracing interceptor opens a root span per call through a
:class:`Tracer`. Service methods decorated with :func:`traced` and blocks
wrapped in :func:`trace_span` attach child spans to whatever span is
current. With no current span both are a single ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
import uuid
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from moving.services.result import ServiceResult

log = structlog.get_logger("moving.telemetry")

# ── Context variables ────────────────────────────────────────────────

_current_span: ContextVar[Span | None] = ContextVar("_current_span", default=None)


def _new_id(length: int) -> str:
    return uuid.uuid4().hex[:length]


# ── Span ─────────────────────────────────────────────────────────────


@dataclass
class Span:
    """Hierarchical timing span with attributes and a terminal status."""

    name: str
    trace_id: str = field(default_factory=lambda: _new_id(32))
    span_id: str = field(default_factory=lambda: _new_id(16))
    parent: Span | None = None
    children: list[Span] = field(default_factory=list)
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None
    attributes: dict[str, Any] = field(default_factory=dict)
    status: str = "OK"
    error: str | None = None

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    def end(self) -> None:
        if self.end_time is None:
            self.end_time = time.perf_counter()

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    def set_status(self, status: str) -> None:
        self.status = status

    def record_error(self, error: BaseException | str) -> None:
        self.error = str(error)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "trace_id": self.trace_id,
            "span_id": self.span_id,
            "duration_ms": round(self.duration_ms, 2),
            "status": self.status,
        }
        if self.error is not None:
            result["error"] = self.error
        if self.attributes:
            result["attributes"] = self.attributes
        if self.children:
            result["children"] = [c.to_dict() for c in self.children]
        return result


def _log_span(span: Span) -> None:
    log.debug(
        "span.complete",
        span_name=span.name,
        trace_id=span.trace_id,
        duration_ms=round(span.duration_ms, 2),
        status=span.status,
        error=span.error,
        children=len(span.children),
    )


# ── Tracer ───────────────────────────────────────────────────────────


class Tracer:
    """Opens root spans for incoming calls.

    A disabled tracer yields ``None`` and never touches the span context,
    so downstream :func:`trace_span` and :func:`traced` stay no-ops too.
    """

    def __init__(self, *, enabled: bool = True, service_name: str = "") -> None:
        self.enabled = enabled
        self.service_name = service_name
        self.finished: list[Span] = []
        self._keep_finished = False

    def keep_finished(self) -> None:
        """Retain completed root spans in :attr:`finished` (used by tests)."""
        self._keep_finished = True

    def shutdown(self) -> None:
        """Stop opening spans and drop retained ones."""
        self.enabled = False
        self.finished.clear()

    @contextmanager
    def start_span(self, name: str, **attributes: Any) -> Generator[Span | None]:
        if not self.enabled:
            yield None
            return

        parent = _current_span.get()
        span = Span(name=name, parent=parent, attributes=dict(attributes))
        if parent is not None:
            span.trace_id = parent.trace_id
            parent.children.append(span)

        token = _current_span.set(span)
        try:
            yield span
        except Exception as exc:
            span.record_error(exc)
            span.set_status("ERROR")
            raise
        finally:
            span.end()
            _current_span.reset(token)
            if parent is None:
                _log_span(span)
                if self._keep_finished:
                    self.finished.append(span)


# ── trace_span context manager ───────────────────────────────────────


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Create a child span under the current span.

    Yields None when no span is active.
    """
    parent = _current_span.get()
    if parent is None:
        yield None
        return

    child = Span(name=name, trace_id=parent.trace_id, parent=parent)
    parent.children.append(child)

    token = _current_span.set(child)
    try:
        yield child
    except Exception as exc:
        child.record_error(exc)
        child.set_status("ERROR")
        raise
    finally:
        child.end()
        _current_span.reset(token)


# ── @traced decorator ────────────────────────────────────────────────


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Decorator: time a service method as a child of the current span.

    A failed :class:`ServiceResult` marks the child span with its error code.
    """

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if _current_span.get() is None:
            return func(*args, **kwargs)

        with trace_span(func.__qualname__) as span:
            result = func(*args, **kwargs)
            if span is not None and isinstance(result, ServiceResult) and result.error:
                span.set_status(str(result.error.code))
                span.record_error(result.error.message)
            return result

    return wrapper


# ── Public helpers ───────────────────────────────────────────────────


def get_current_span() -> Span | None:
    """Get the current active span (for manual annotation)."""
    return _current_span.get()
