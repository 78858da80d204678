"""Internal diagnostics logger.

Failures inside the facade (a sink rejecting a write, the APM agent
refusing an error) are reported here instead of being raised to the caller.
"""
from __future__ import annotations

from typing import Any

import structlog

from mp_logfan.errors import LogFanError

_LOGGER_NAME = "mp_logfan"


def get_diagnostics_logger(**initial_values: Any) -> Any:
    """Return the bound structlog logger used for the facade's own output."""
    logger = structlog.get_logger(_LOGGER_NAME)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


def report(event: str, exc: BaseException | None = None, **fields: Any) -> None:
    """Report an internal failure; never raises.

    A :class:`~mp_logfan.errors.LogFanError` contributes its structured
    fields; explicit keyword fields win over them.
    """
    try:
        if isinstance(exc, LogFanError):
            for key, value in exc.to_dict().items():
                fields.setdefault(key, value)
        if exc is not None:
            fields["error"] = repr(exc)
        get_diagnostics_logger().warning(event, **fields)
    except Exception:  # noqa: BLE001
        pass


__all__ = ["get_diagnostics_logger", "report"]
