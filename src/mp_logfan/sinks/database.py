"""Database sink – hands json payloads to an externally supplied receiver."""
from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import threading
from collections.abc import Awaitable, Callable
from typing import Any

from mp_logfan.diagnostics import report
from mp_logfan.sinks.ports import SinkAdapter

#: Sync or async callable; an awaitable result is scheduled, not awaited.
Receiver = Callable[[dict[str, Any]], Any]


class DatabaseSink(SinkAdapter):
    """Call ``receiver(record)`` once per accepted payload.

    The receiver may be sync or async.  An awaitable result is never waited
    for inside :meth:`accept`: it becomes a task on the caller's running
    event loop, or, for synchronous callers, is submitted to a private
    event loop running in a daemon thread (started on first use).  Any
    failure, raised or returned through the awaitable, is reported to the
    diagnostics logger.

    :meth:`drain` (async) and :meth:`wait` (sync) block until everything in
    flight has settled; :meth:`close` waits, then stops the private loop.

    Parameters
    ----------
    receiver:
        Callable taking the record dict.
    close_timeout:
        Seconds :meth:`close` waits for in-flight writes.
    """

    name = "database"

    def __init__(self, receiver: Receiver, *, close_timeout: float = 5.0) -> None:
        self._receiver = receiver
        self._close_timeout = close_timeout
        self._tasks: set[asyncio.Task[Any]] = set()
        self._futures: set[concurrent.futures.Future[Any]] = set()
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None

    def accept(self, payload: Any, *, level: str) -> None:  # noqa: ARG002
        record = dict(payload)
        try:
            result = self._receiver(record)
        except Exception as exc:  # noqa: BLE001
            report("database.receiver_failed", exc=exc)
            return
        if inspect.isawaitable(result):
            self._schedule(result)

    async def drain(self) -> None:
        with self._lock:
            tasks = list(self._tasks)
            futures = list(self._futures)
        pending = tasks + [asyncio.wrap_future(f) for f in futures]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def wait(self, timeout: float | None = None) -> None:
        """Block until writes submitted from synchronous callers have settled."""
        with self._lock:
            futures = list(self._futures)
        if futures:
            concurrent.futures.wait(futures, timeout=timeout)

    def flush(self) -> None:
        self.wait(self._close_timeout)

    def close(self) -> None:
        self.wait(self._close_timeout)
        with self._lock:
            loop, self._loop = self._loop, None
            thread, self._thread = self._thread, None
        if loop is not None:
            loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout=self._close_timeout)
        if loop is not None and not loop.is_running():
            loop.close()

    def _schedule(self, awaitable: Awaitable[Any]) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is not None:
            task = running.create_task(self._settle(awaitable))
            with self._lock:
                self._tasks.add(task)
            task.add_done_callback(self._forget_task)
            return
        future = asyncio.run_coroutine_threadsafe(self._settle(awaitable), self._background_loop())
        with self._lock:
            self._futures.add(future)
        future.add_done_callback(self._forget_future)

    def _background_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(
                    target=loop.run_forever,
                    daemon=True,
                    name="logfan-database",
                )
                thread.start()
                self._loop, self._thread = loop, thread
            return self._loop

    def _forget_task(self, task: asyncio.Task[Any]) -> None:
        with self._lock:
            self._tasks.discard(task)

    def _forget_future(self, future: concurrent.futures.Future[Any]) -> None:
        with self._lock:
            self._futures.discard(future)

    @staticmethod
    async def _settle(awaitable: Awaitable[Any]) -> None:
        try:
            await awaitable
        except Exception as exc:  # noqa: BLE001
            report("database.receiver_failed", exc=exc)


__all__ = ["DatabaseSink", "Receiver"]
