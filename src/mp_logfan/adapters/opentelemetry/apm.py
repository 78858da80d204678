"""OpenTelemetry adapter – OtelApm capability."""
from __future__ import annotations

from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from mp_logfan.apm import CorrelationContext
from mp_logfan.events import ErrorInfo


class OtelApm:
    """APM capability backed by the OpenTelemetry context.

    The current span's trace id becomes ``trace_id`` and its span id
    ``transaction_id`` (hex encoded, as in W3C ``traceparent``).  Errors are
    recorded on the current span when it is recording.
    """

    def current_transaction(self) -> CorrelationContext | None:
        ctx = trace.get_current_span().get_span_context()
        if not ctx.is_valid:
            return None
        return CorrelationContext(
            trace_id=format(ctx.trace_id, "032x"),
            transaction_id=format(ctx.span_id, "016x"),
        )

    def capture_error(self, error: Any) -> None:
        span = trace.get_current_span()
        if not span.is_recording():
            return
        if isinstance(error, BaseException):
            span.record_exception(error)
            description = f"{type(error).__name__}: {error}"
        elif isinstance(error, ErrorInfo):
            attributes = {"exception.type": error.name, "exception.message": error.message}
            if error.stack_trace:
                attributes["exception.stacktrace"] = error.stack_trace
            span.add_event("exception", attributes=attributes)
            description = f"{error.name}: {error.message}"
        else:
            description = str(error)
        span.set_status(Status(StatusCode.ERROR, description))


__all__ = ["OtelApm"]
