"""Errors raised by the logging facade.

Only configuration problems reach the caller, and only at startup.  Sink
failures are raised inside a sink and caught by whoever drives it; their
``to_dict()`` fields are merged into the diagnostics event.

Hierarchy::

    LogFanError
    ├── ConfigError
    │   └── InvalidSettingValueError
    ├── AlreadyConfiguredError
    └── SinkWriteError
"""
from __future__ import annotations

from typing import Any


class LogFanError(Exception):
    """Root of the hierarchy.

    Keyword arguments become structured context, emitted alongside
    :attr:`code` and :attr:`message` by :meth:`to_dict`.
    """

    code: str = "logfan_error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.context}


class ConfigError(LogFanError):
    """Settings are invalid or the logger cannot be wired from them."""

    code = "config_error"


class InvalidSettingValueError(ConfigError):
    code = "invalid_setting_value"

    def __init__(self, setting: str, value: object, reason: str) -> None:
        super().__init__(
            f"Setting '{setting}' has invalid value {value!r}: {reason}",
            setting=setting,
        )
        self.setting = setting
        self.value = value
        self.reason = reason


class AlreadyConfiguredError(LogFanError):
    """``configure()`` was called after the process-wide logger was built."""

    code = "already_configured"


class SinkWriteError(LogFanError):
    """A sink's transport rejected a write; ``dropped`` records were lost."""

    code = "sink_write_error"

    def __init__(
        self,
        sink: str,
        message: str,
        *,
        status_code: int | None = None,
        dropped: int = 0,
    ) -> None:
        context: dict[str, Any] = {"sink": sink, "dropped": dropped}
        if status_code is not None:
            context["status_code"] = status_code
        super().__init__(message, **context)
        self.sink = sink
        self.status_code = status_code
        self.dropped = dropped


__all__ = [
    "AlreadyConfiguredError",
    "ConfigError",
    "InvalidSettingValueError",
    "LogFanError",
    "SinkWriteError",
]
