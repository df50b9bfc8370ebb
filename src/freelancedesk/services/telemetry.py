"""Span timing for service calls, surfaced with ``--verbose``.

Telemetry is off unless :func:`enable_telemetry` ran in the current
context.  While on, every :func:`traced` service method opens a root
span, :func:`trace_span` blocks nest under it, and the finished tree is
attached to the method's ServiceResult as ``meta["telemetry"]``.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from freelancedesk.services.result import ServiceResult

log = structlog.get_logger("freelancedesk.telemetry")

_enabled: ContextVar[bool] = ContextVar("freelancedesk_telemetry", default=False)
_current_span: ContextVar[Span | None] = ContextVar("freelancedesk_span", default=None)

# Spans at least this slow are logged at INFO rather than DEBUG.
SLOW_SPAN_MS = 500.0


@dataclass
class Span:
    """One timed step; ``children`` are the steps nested inside it."""

    name: str
    parent: Span | None = field(default=None, repr=False)
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    started: float = field(default_factory=time.perf_counter, repr=False)
    finished: float | None = field(default=None, repr=False)

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def end(self, error: BaseException | None = None) -> None:
        self.finished = time.perf_counter()
        if error is not None:
            self.error = type(error).__name__

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def child(self, name: str) -> Span:
        span = Span(name=name, parent=self)
        self.children.append(span)
        return span

    def to_dict(self) -> dict[str, Any]:
        tree: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.error:
            tree["error"] = self.error
        if self.annotations:
            tree["annotations"] = dict(self.annotations)
        if self.children:
            tree["children"] = [c.to_dict() for c in self.children]
        return tree


def enable_telemetry() -> None:
    """Turn span collection on (AppContext does this for ``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    """Innermost open span, or None when telemetry is off."""
    return _current_span.get() if _enabled.get() else None


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    """Make *span* the current span until the block exits, then close it."""
    token = _current_span.set(span)
    try:
        yield span
    except Exception as exc:
        span.end(exc)
        raise
    else:
        span.end()
    finally:
        _current_span.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a block as a child of the current span.

    Yields None when telemetry is off or no traced call is running, so
    callers guard annotations with ``if span is not None``.
    """
    parent = get_current_span()
    if parent is None:
        yield None
        return
    with _activate(parent.child(name)) as span:
        yield span


def _record(span: Span) -> None:
    emit = log.info if span.duration_ms >= SLOW_SPAN_MS else log.debug
    emit(
        "span.complete",
        span_name=span.name,
        duration_ms=round(span.duration_ms, 2),
        error=span.error,
        children=len(span.children),
    )


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method as a root span.

    A returned ServiceResult gets the finished tree in its meta; a failed
    result marks the root span with its error code.
    """

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        try:
            with _activate(root):
                result = func(*args, **kwargs)
        except Exception:
            _record(root)
            raise

        if not isinstance(result, ServiceResult):
            _record(root)
            return result
        if result.error is not None:
            root.error = result.error.code
        _record(root)
        meta = {**(result.meta or {}), "telemetry": root.to_dict()}
        return result.model_copy(update={"meta": meta})  # type: ignore[return-value]

    return wrapper
