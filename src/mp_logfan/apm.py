"""APM capability port – trace lookup and error capture."""
from __future__ import annotations

import dataclasses
from typing import Any, Protocol, runtime_checkable


@dataclasses.dataclass(frozen=True)
class CorrelationContext:
    """Trace and transaction ids active at the instant of a log call."""

    trace_id: str | None = None
    transaction_id: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.trace_id is None and self.transaction_id is None


EMPTY_CONTEXT = CorrelationContext()


@runtime_checkable
class ApmCapability(Protocol):
    """Port: the subset of an APM / tracing agent the facade relies on."""

    def current_transaction(self) -> CorrelationContext | None: ...

    def capture_error(self, error: Any) -> None: ...


class NoopApm:
    """Silent capability used when no APM agent is configured."""

    def current_transaction(self) -> CorrelationContext | None:
        return None

    def capture_error(self, error: Any) -> None:  # noqa: ARG002
        pass


__all__ = ["ApmCapability", "CorrelationContext", "EMPTY_CONTEXT", "NoopApm"]
