"""Sink port – the single "accept a formatted payload" contract."""
from __future__ import annotations

import abc
from typing import Any


class SinkAdapter(abc.ABC):
    """Port: one log transport.

    ``accept`` must not block on slow I/O; implementations buffer or
    schedule work internally.  Each sink owns its failure handling and must
    be safe to call from several threads at once.
    """

    name: str = "sink"

    @abc.abstractmethod
    def accept(self, payload: Any, *, level: str) -> None:
        """Take one formatted payload; *level* is the record's level name."""

    def flush(self) -> None:
        """Push out anything buffered.  No-op by default."""

    def close(self) -> None:
        """Release resources.  Defaults to :meth:`flush`."""
        self.flush()


__all__ = ["SinkAdapter"]
