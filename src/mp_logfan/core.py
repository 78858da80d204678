"""Logger core – normalises one log call and fans it out to every sink."""
from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from typing import Any

from mp_logfan.apm import ApmCapability, NoopApm
from mp_logfan.clock import Clock, SystemClock
from mp_logfan.correlation import CorrelationResolver
from mp_logfan.diagnostics import report
from mp_logfan.events import ErrorEvent, LogEvent, MessageEvent, NormalizedRecord
from mp_logfan.formats import FormatFn
from mp_logfan.levels import LogLevel, permits
from mp_logfan.sinks.ports import SinkAdapter


@dataclasses.dataclass(frozen=True)
class SinkRegistration:
    """A sink, the lowest-priority level it accepts, and its format pipeline."""

    sink: SinkAdapter
    min_level: LogLevel
    format: FormatFn

    @property
    def name(self) -> str:
        return self.sink.name


class LoggerCore:
    """Fan-out engine.

    Registrations are fixed at construction and dispatched in order.
    :meth:`log` never raises: formatter and sink failures are reported to
    the diagnostics logger and the next sink still receives the record.

    Usage::

        core = LoggerCore(
            [SinkRegistration(ConsoleSink(), LogLevel.INFO, formats.cli)],
            apm=OtelApm(),
        )
        core.log(MessageEvent(LogLevel.INFO, "user created", {"user_id": 42}))
        core.log(ErrorEvent.from_exception(exc))
    """

    def __init__(
        self,
        registrations: Iterable[SinkRegistration],
        *,
        apm: ApmCapability | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._registrations: tuple[SinkRegistration, ...] = tuple(registrations)
        self._apm = apm or NoopApm()
        self._resolver = CorrelationResolver(self._apm)
        self._clock = clock or SystemClock()

    @property
    def registrations(self) -> tuple[SinkRegistration, ...]:
        return self._registrations

    def log(self, event: LogEvent) -> None:
        try:
            record = self._normalize(event)
        except Exception as exc:  # noqa: BLE001
            report("logger.normalize_failed", exc=exc)
            return
        self._dispatch(record)

    def log_message(self, level: LogLevel | str, message: str, **payload: Any) -> None:
        self.log(MessageEvent(level=level, message=message, payload=payload))

    def log_exception(self, exc: BaseException) -> None:
        self.log(ErrorEvent.from_exception(exc))

    def build_record(self, event: LogEvent) -> NormalizedRecord:
        """Normalise *event* without dispatching it."""
        return self._normalize(event)

    def flush(self) -> None:
        for registration in self._registrations:
            try:
                registration.sink.flush()
            except Exception as exc:  # noqa: BLE001
                report("sink.flush_failed", exc=exc, sink=registration.name)

    def close(self) -> None:
        for registration in self._registrations:
            try:
                registration.sink.close()
            except Exception as exc:  # noqa: BLE001
                report("sink.close_failed", exc=exc, sink=registration.name)

    def _normalize(self, event: LogEvent) -> NormalizedRecord:
        if event.kind == "error":
            self._capture(event)
            level: LogLevel | str = LogLevel.ERROR
            message = event.error.message
            extra: dict[str, Any] = {
                "name": event.error.name,
                "stack_trace": event.error.stack_trace,
            }
        elif event.kind == "message":
            level = event.level
            message = event.message
            extra = dict(event.payload)
        else:
            raise TypeError(f"Unsupported log event kind: {event.kind!r}")

        ctx = self._resolver.resolve()
        return NormalizedRecord(
            level=level,
            message=message,
            timestamp=self._clock.now(),
            trace_id=ctx.trace_id,
            transaction_id=ctx.transaction_id,
            extra=extra,
        )

    def _capture(self, event: ErrorEvent) -> None:
        try:
            self._apm.capture_error(event.exception if event.exception is not None else event.error)
        except Exception as exc:  # noqa: BLE001
            report("apm.capture_failed", exc=exc)

    def _dispatch(self, record: NormalizedRecord) -> None:
        for registration in self._registrations:
            if not permits(registration.min_level, record.level):
                continue
            try:
                payload = registration.format(record)
                registration.sink.accept(payload, level=record.level)
            except Exception as exc:  # noqa: BLE001
                report("sink.accept_failed", exc=exc, sink=registration.name)


__all__ = ["LoggerCore", "SinkRegistration"]
