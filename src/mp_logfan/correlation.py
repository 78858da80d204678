"""Correlation resolver – reads trace ids from the APM capability per call."""
from __future__ import annotations

from mp_logfan.apm import EMPTY_CONTEXT, ApmCapability, CorrelationContext, NoopApm


class CorrelationResolver:
    """Resolve the :class:`CorrelationContext` active right now.

    Nothing is cached: every call asks the capability again.  A missing
    capability, no active transaction and a failing lookup all yield an
    empty context.
    """

    def __init__(self, apm: ApmCapability | None = None) -> None:
        self._apm = apm or NoopApm()

    def resolve(self) -> CorrelationContext:
        try:
            ctx = self._apm.current_transaction()
        except Exception:  # noqa: BLE001
            return EMPTY_CONTEXT
        if ctx is None:
            return EMPTY_CONTEXT
        return CorrelationContext(
            trace_id=_opaque(ctx.trace_id),
            transaction_id=_opaque(ctx.transaction_id),
        )


def _opaque(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


__all__ = ["CorrelationResolver"]
