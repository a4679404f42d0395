"""Tests for telemetry primitives: Span, Tracer, trace_span, @traced."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from moving.services.result import ErrorCode, ServiceResult
from moving.services.telemetry import (
    Span,
    Tracer,
    _current_span,
    get_current_span,
    trace_span,
    traced,
)


@pytest.fixture(autouse=True)
def _reset_span() -> Generator[None]:
    yield
    _current_span.set(None)


class TestSpan:
    def test_ids(self) -> None:
        span = Span(name="x")
        assert len(span.trace_id) == 32
        assert len(span.span_id) == 16

    def test_duration_before_end_is_zero(self) -> None:
        assert Span(name="x").duration_ms == 0.0

    def test_to_dict_with_error(self) -> None:
        span = Span(name="x")
        span.record_error(ValueError("bad"))
        span.set_status("ERROR")
        span.end()
        d = span.to_dict()
        assert d["status"] == "ERROR"
        assert d["error"] == "bad"
        assert "children" not in d


class TestTracer:
    def test_disabled_yields_none(self) -> None:
        tracer = Tracer(enabled=False)
        with tracer.start_span("call") as span:
            assert span is None
            assert get_current_span() is None

    def test_root_span_is_current(self) -> None:
        tracer = Tracer()
        tracer.keep_finished()
        with tracer.start_span("call", product="moving") as span:
            assert span is not None
            assert get_current_span() is span
        assert get_current_span() is None
        assert tracer.finished == [span]
        assert span.attributes == {"product": "moving"}
        assert span.end_time is not None

    def test_exception_marks_error(self) -> None:
        tracer = Tracer()
        tracer.keep_finished()
        with pytest.raises(RuntimeError), tracer.start_span("call"):
            raise RuntimeError("boom")
        span = tracer.finished[0]
        assert span.status == "ERROR"
        assert span.error == "boom"

    def test_shutdown_stops_tracing(self) -> None:
        tracer = Tracer()
        tracer.keep_finished()
        with tracer.start_span("call"):
            pass
        tracer.shutdown()
        assert tracer.finished == []
        with tracer.start_span("call") as span:
            assert span is None


class TestTraceSpan:
    def test_noop_without_parent(self) -> None:
        with trace_span("child") as span:
            assert span is None

    def test_child_shares_trace_id(self) -> None:
        with Tracer().start_span("root") as root, trace_span("child") as child:
            assert root is not None
            assert child is not None
            assert child.trace_id == root.trace_id
            assert root.children == [child]


class _Svc:
    @traced
    def ok(self) -> ServiceResult:
        return ServiceResult(ok=True, op="ok")

    @traced
    def fail(self) -> ServiceResult:
        return ServiceResult.failure("fail", ErrorCode.NOT_FOUND, "nothing here")


class TestTraced:
    def test_passthrough_without_span(self) -> None:
        assert _Svc().ok().ok

    def test_child_span_per_call(self) -> None:
        with Tracer().start_span("root") as root:
            _Svc().ok()
        assert root is not None
        assert [c.name for c in root.children] == ["_Svc.ok"]
        assert root.children[0].status == "OK"

    def test_failed_result_marks_span(self) -> None:
        with Tracer().start_span("root") as root:
            _Svc().fail()
        assert root is not None
        child = root.children[0]
        assert child.status == "NOT_FOUND"
        assert child.error == "nothing here"
