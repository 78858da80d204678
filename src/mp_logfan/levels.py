"""Log levels – ordered by verbosity, most severe first."""
from __future__ import annotations

from enum import Enum


class LogLevel(str, Enum):
    """Known log levels.

    Ordering follows verbosity: ``ERROR`` (0) is the most severe and
    ``SILLY`` (6) the most verbose.  A sink with ``min_level=INFO`` accepts
    ``error``, ``warn`` and ``info`` records.
    """

    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    HTTP = "http"
    VERBOSE = "verbose"
    DEBUG = "debug"
    SILLY = "silly"

    @property
    def severity(self) -> int:
        return _ORDER.index(self)

    @classmethod
    def parse(cls, value: "LogLevel | str") -> "LogLevel | None":
        """Return the matching :class:`LogLevel`, or ``None`` for free-form levels."""
        if isinstance(value, LogLevel):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


_ORDER: tuple[LogLevel, ...] = tuple(LogLevel)


def level_name(level: LogLevel | str) -> str:
    """Plain string name for *level* (free-form levels are returned as given)."""
    return level.value if isinstance(level, LogLevel) else str(level)


def permits(min_level: LogLevel, level: LogLevel | str) -> bool:
    """``True`` when a sink at *min_level* should receive a record at *level*.

    Unknown levels are never filtered out.
    """
    known = LogLevel.parse(level)
    if known is None:
        return True
    return known.severity <= min_level.severity


__all__ = ["LogLevel", "level_name", "permits"]
