"""Span decorator for report and program operations."""

import asyncio
from collections.abc import Callable, Mapping, Sized
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

T = TypeVar("T")

# Keyword arguments copied onto spans. Anything else (document bodies,
# callbacks) stays out of the trace.
_RECORDED_KWARGS = frozenset({
    "program_id", "limit", "months", "days", "family", "collection", "status",
})


def _record_kwargs(span: trace.Span, kwargs: Mapping[str, Any]) -> None:
    for key, value in kwargs.items():
        if key in _RECORDED_KWARGS:
            span.set_attribute(f"arg.{key}", str(value))


def _record_result(span: trace.Span, result: Any) -> None:
    # Lists of records and activity rows get their length; snapshots don't.
    if isinstance(result, Sized) and not isinstance(result, (str, bytes, Mapping)):
        span.set_attribute("result.size", len(result))


def _fail(span: trace.Span, exc: Exception) -> None:
    span.set_status(Status(StatusCode.ERROR, str(exc)))
    span.record_exception(exc)


def traced(operation_name: str | None = None) -> Callable:
    """Wrap a sync or async callable in a span named ``operation_name``.

    The span records the allowlisted keyword arguments, the size of a
    returned sequence, and any raised exception (which is re-raised).
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        tracer = trace.get_tracer(__name__)
        span_name = operation_name or f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(span_name) as span:
                _record_kwargs(span, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _fail(span, e)
                    raise
                _record_result(span, result)
                span.set_status(Status(StatusCode.OK))
                return result

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(span_name) as span:
                _record_kwargs(span, kwargs)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _fail(span, e)
                    raise
                _record_result(span, result)
                span.set_status(Status(StatusCode.OK))
                return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
