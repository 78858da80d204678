"""Console sink – cli-formatted lines to stdout / stderr."""
from __future__ import annotations

import sys
import threading
from typing import Any, TextIO

from mp_logfan.levels import LogLevel
from mp_logfan.sinks.ports import SinkAdapter

_STDERR_LEVELS = frozenset({LogLevel.ERROR.value, LogLevel.WARN.value})


class ConsoleSink(SinkAdapter):
    """Write each line to stderr for ``error``/``warn`` and stdout otherwise.

    Streams are looked up on every write so test capture and redirection
    keep working.
    """

    name = "console"

    def __init__(self, stdout: TextIO | None = None, stderr: TextIO | None = None) -> None:
        self._stdout = stdout
        self._stderr = stderr
        self._lock = threading.Lock()

    def accept(self, payload: Any, *, level: str) -> None:
        stream = self._stream_for(level)
        with self._lock:
            stream.write(f"{payload}\n")

    def flush(self) -> None:
        with self._lock:
            for stream in (self._stream_for(None), self._stream_for(LogLevel.ERROR.value)):
                stream.flush()

    def close(self) -> None:
        # never close process streams
        self.flush()

    def _stream_for(self, level: str | None) -> TextIO:
        if level is not None and level.lower() in _STDERR_LEVELS:
            return self._stderr or sys.stderr
        return self._stdout or sys.stdout


__all__ = ["ConsoleSink"]
