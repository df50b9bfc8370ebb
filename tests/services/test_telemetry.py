"""Tests for telemetry primitives: Span, trace_span, @traced."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from freelancedesk.services.result import ServiceError, ServiceResult
from freelancedesk.services.telemetry import (
    Span,
    _current_span,
    disable_telemetry,
    enable_telemetry,
    get_current_span,
    trace_span,
    traced,
)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    yield
    disable_telemetry()
    _current_span.set(None)


class TestSpan:
    def test_duration_before_end_is_zero(self) -> None:
        assert Span(name="s").duration_ms == 0.0

    def test_to_dict(self) -> None:
        root = Span(name="root")
        child = Span(name="child", parent=root)
        root.children.append(child)
        child.annotate("rows", 3)
        child.end()
        root.end()
        d = root.to_dict()
        assert d["name"] == "root"
        assert "annotations" not in d
        assert d["children"][0]["annotations"] == {"rows": 3}


class _Service:
    @traced
    def run(self) -> ServiceResult:
        with trace_span("step") as span:
            if span is not None:
                span.annotate("n", 1)
        return ServiceResult(ok=True, op="run", meta={"taken_at": "t"})

    @traced
    def boom(self) -> ServiceResult:
        raise RuntimeError("boom")

    @traced
    def fails(self) -> ServiceResult:
        return ServiceResult(
            ok=False, op="fails", error=ServiceError(code="NOT_FOUND", message="gone")
        )


class TestTraced:
    def test_disabled_leaves_meta_alone(self) -> None:
        result = _Service().run()
        assert result.meta == {"taken_at": "t"}

    def test_enabled_injects_span_tree(self) -> None:
        enable_telemetry()
        result = _Service().run()
        assert result.meta is not None
        assert result.meta["taken_at"] == "t"
        telemetry = result.meta["telemetry"]
        assert telemetry["name"] == "_Service.run"
        assert telemetry["children"][0]["name"] == "step"
        assert telemetry["children"][0]["annotations"] == {"n": 1}

    def test_exception_resets_context(self) -> None:
        enable_telemetry()
        with pytest.raises(RuntimeError):
            _Service().boom()
        assert get_current_span() is None

    def test_failed_result_marks_root_with_error_code(self) -> None:
        enable_telemetry()
        result = _Service().fails()
        assert result.meta is not None
        assert result.meta["telemetry"]["error"] == "NOT_FOUND"

    def test_successful_span_has_no_error(self) -> None:
        enable_telemetry()
        result = _Service().run()
        assert result.meta is not None
        assert "error" not in result.meta["telemetry"]


class TestTraceSpan:
    def test_exception_in_block_recorded_on_span(self) -> None:
        root = Span(name="root")
        token = _current_span.set(root)
        enable_telemetry()
        try:
            with pytest.raises(ValueError), trace_span("parse"):
                raise ValueError("bad")
        finally:
            _current_span.reset(token)
        assert root.children[0].to_dict()["error"] == "ValueError"
        assert root.children[0].duration_ms >= 0.0

    def test_outside_traced_call_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("orphan") as span:
            assert span is None

    def test_disabled_yields_none(self) -> None:
        with trace_span("x") as span:
            assert span is None
        assert get_current_span() is None
