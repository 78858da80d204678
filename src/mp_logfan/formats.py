"""Format pipelines – project a :class:`NormalizedRecord` for one sink.

Each pipeline is a pure function built on a structlog renderer:

* :func:`cli`  – colorized single line for terminals (``str``)
* :func:`file` – stable ``key=value`` line for rotating files (``str``)
* :func:`json` – JSON-safe ``dict`` for search index / datastore sinks

None of them drop extra fields; values that are not JSON-native are
stringified.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any

import structlog

from mp_logfan.events import NormalizedRecord

FormatFn = Callable[[NormalizedRecord], Any]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

#: Leading key order of file lines.  Downstream parsers depend on it.
FILE_KEY_ORDER: tuple[str, ...] = ("timestamp", "level", "message", "trace_id", "transaction_id")

#: Keys ConsoleRenderer lays out itself; extra fields with these names are
#: rendered as ``extra.<key>``.
CONSOLE_RESERVED_KEYS: frozenset[str] = frozenset(
    {"timestamp", "level", "event", "exception", "exc_info", "stack", "logger", "logger_name"}
)

_RESET = "\033[0m"
_BRIGHT = "\033[1m"
_DIM = "\033[2m"
_RED = "\033[31m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_BLUE = "\033[34m"
_MAGENTA = "\033[35m"
_CYAN = "\033[36m"

LEVEL_STYLES: dict[str, str] = {
    "error": _RED + _BRIGHT,
    "warn": _YELLOW,
    "info": _GREEN,
    "http": _GREEN + _DIM,
    "verbose": _CYAN,
    "debug": _BLUE,
    "silly": _MAGENTA,
}

_console_renderer = structlog.dev.ConsoleRenderer(
    colors=True,
    level_styles=LEVEL_STYLES,
    sort_keys=False,
)
_file_renderer = structlog.processors.KeyValueRenderer(
    key_order=list(FILE_KEY_ORDER),
    drop_missing=True,
)
_json_renderer = structlog.processors.JSONRenderer()


def cli(record: NormalizedRecord) -> str:
    event_dict: dict[str, Any] = {
        "timestamp": record.timestamp.strftime(TIMESTAMP_FORMAT),
        "level": record.level,
        "event": _single_line(record.message),
    }
    for key, value in record.as_dict().items():
        if key in ("timestamp", "level", "message"):
            continue
        while key in CONSOLE_RESERVED_KEYS or key in event_dict:
            key = f"extra.{key}"
        event_dict[key] = _single_line(value)
    return _console_renderer(None, record.level, event_dict)


def _single_line(value: Any) -> Any:
    if isinstance(value, str):
        return value.replace("\r", "\\r").replace("\n", "\\n")
    return value


def file(record: NormalizedRecord) -> str:
    event_dict = record.as_dict()
    event_dict["timestamp"] = record.timestamp.strftime(TIMESTAMP_FORMAT)
    return _file_renderer(None, record.level, event_dict)


def json(record: NormalizedRecord) -> dict[str, Any]:
    return {key: to_jsonable(value) for key, value in record.as_dict().items()}


def render_json(payload: Mapping[str, Any]) -> str:
    """Serialise a :func:`json` payload to a single JSON line."""
    return _json_renderer(None, "", dict(payload))


def to_jsonable(value: Any) -> Any:
    """Coerce *value* into something :mod:`json` can serialise."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return to_jsonable(value.value)
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(dataclasses.asdict(value))
    return str(value)


__all__ = [
    "CONSOLE_RESERVED_KEYS",
    "FILE_KEY_ORDER",
    "FormatFn",
    "LEVEL_STYLES",
    "TIMESTAMP_FORMAT",
    "cli",
    "file",
    "json",
    "render_json",
    "to_jsonable",
]
