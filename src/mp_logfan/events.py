"""Log events and the normalised record handed to every sink."""
from __future__ import annotations

import dataclasses
import traceback
from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType
from typing import Any, ClassVar, Literal, Union

from mp_logfan.levels import LogLevel, level_name

#: Field names owned by :class:`NormalizedRecord`; payload keys never override them.
RESERVED_FIELDS: frozenset[str] = frozenset(
    {"level", "message", "timestamp", "trace_id", "transaction_id"}
)


@dataclasses.dataclass(frozen=True)
class MessageEvent:
    """A plain log call: level, message and optional extra fields."""

    kind: ClassVar[Literal["message"]] = "message"

    level: LogLevel | str
    message: str
    payload: Mapping[str, Any] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class ErrorInfo:
    name: str
    message: str
    stack_trace: str | None = None


@dataclasses.dataclass(frozen=True)
class ErrorEvent:
    """An error to log at ``error`` level and forward to the APM agent.

    *exception* keeps the live exception (when there is one) so the APM
    capability can capture it with its native traceback.
    """

    kind: ClassVar[Literal["error"]] = "error"

    error: ErrorInfo
    exception: BaseException | None = dataclasses.field(default=None, compare=False, repr=False)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorEvent":
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return cls(
            error=ErrorInfo(name=type(exc).__name__, message=str(exc), stack_trace=stack),
            exception=exc,
        )


LogEvent = Union[MessageEvent, ErrorEvent]


@dataclasses.dataclass(frozen=True)
class NormalizedRecord:
    """Canonical, immutable record fanned out to every sink.

    Correlation ids are ``None`` when no trace was active; :meth:`as_dict`
    omits them entirely in that case.
    """

    level: str
    message: str
    timestamp: datetime
    trace_id: str | None = None
    transaction_id: str | None = None
    extra: Mapping[str, Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "level", level_name(self.level))
        object.__setattr__(
            self,
            "extra",
            MappingProxyType({k: v for k, v in self.extra.items() if k not in RESERVED_FIELDS}),
        )

    def as_dict(self) -> dict[str, Any]:
        """Return a fresh ordered dict; mutating it never touches the record."""
        data: dict[str, Any] = {"level": self.level, "message": self.message}
        if self.trace_id is not None:
            data["trace_id"] = self.trace_id
        if self.transaction_id is not None:
            data["transaction_id"] = self.transaction_id
        data["timestamp"] = self.timestamp
        data.update(self.extra)
        return data


__all__ = [
    "ErrorEvent",
    "ErrorInfo",
    "LogEvent",
    "MessageEvent",
    "NormalizedRecord",
    "RESERVED_FIELDS",
]
