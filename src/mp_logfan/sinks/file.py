"""Rotating file sink – file-formatted lines, rotated daily."""
from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

from mp_logfan.sinks.ports import SinkAdapter


class RotatingFileSink(SinkAdapter):
    """Append lines to ``<directory>/<filename>``, rotating at midnight.

    Rotation and write serialisation are delegated to
    :class:`logging.handlers.TimedRotatingFileHandler`; its lock keeps lines
    from concurrent callers whole and in order.  The file is opened on the
    first write.

    Parameters
    ----------
    directory:
        Target directory, created if missing.
    filename:
        Active file name; rotated files get a ``.YYYY-MM-DD`` suffix.
    backup_count:
        Rotated files to keep.  ``0`` keeps all of them.
    """

    name = "file"

    def __init__(
        self,
        directory: str | Path = "logs",
        filename: str = "logs.log",
        backup_count: int = 14,
        encoding: str = "utf-8",
    ) -> None:
        self._path = Path(directory).resolve() / filename
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._handler = TimedRotatingFileHandler(
            self._path,
            when="midnight",
            backupCount=backup_count,
            encoding=encoding,
            delay=True,
        )
        self._handler.setFormatter(logging.Formatter("%(message)s"))

    @property
    def path(self) -> Path:
        return self._path

    def accept(self, payload: Any, *, level: str) -> None:
        record = logging.makeLogRecord({"msg": str(payload), "levelname": level.upper()})
        self._handler.handle(record)

    def flush(self) -> None:
        self._handler.flush()

    def close(self) -> None:
        self._handler.close()


__all__ = ["RotatingFileSink"]
