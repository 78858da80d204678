"""Unit tests for the receiver-backed database sink."""
from __future__ import annotations

import asyncio
import time
from typing import Any

from structlog.testing import capture_logs

from mp_logfan import LoggerCore, LogLevel, MessageEvent, SinkRegistration, formats
from mp_logfan.sinks import DatabaseSink


class TestSyncReceiver:
    def test_receiver_called_once_per_payload(self) -> None:
        received: list[dict[str, Any]] = []
        sink = DatabaseSink(received.append)
        sink.accept({"level": "info", "message": "a"}, level="info")
        sink.accept({"level": "info", "message": "b"}, level="info")
        assert [r["message"] for r in received] == ["a", "b"]

    def test_receiver_gets_a_copy(self) -> None:
        received: list[dict[str, Any]] = []
        payload = {"level": "info", "message": "a"}
        DatabaseSink(received.append).accept(payload, level="info")
        received[0]["message"] = "changed"
        assert payload["message"] == "a"

    def test_raising_receiver_is_reported(self) -> None:
        def receiver(record: dict[str, Any]) -> None:
            raise ConnectionError("db down")

        with capture_logs() as logs:
            DatabaseSink(receiver).accept({"message": "a"}, level="info")

        [entry] = [e for e in logs if e["event"] == "database.receiver_failed"]
        assert "db down" in entry["error"]


class TestAsyncReceiver:
    def test_scheduled_on_running_loop_without_waiting(self) -> None:
        received: list[dict[str, Any]] = []
        gate = asyncio.Event()

        async def receiver(record: dict[str, Any]) -> None:
            await gate.wait()
            received.append(record)

        async def run() -> None:
            sink = DatabaseSink(receiver)
            sink.accept({"message": "a"}, level="info")
            assert received == []
            gate.set()
            await sink.drain()
            assert [r["message"] for r in received] == ["a"]

        asyncio.run(run())

    def test_rejected_awaitable_is_reported(self) -> None:
        async def receiver(record: dict[str, Any]) -> None:
            raise TimeoutError("write timed out")

        async def run() -> None:
            sink = DatabaseSink(receiver)
            sink.accept({"message": "a"}, level="info")
            await sink.drain()

        with capture_logs() as logs:
            asyncio.run(run())

        assert any(e["event"] == "database.receiver_failed" for e in logs)

    def test_without_running_loop_accept_returns_before_write_completes(self) -> None:
        received: list[dict[str, Any]] = []

        async def slow_receiver(record: dict[str, Any]) -> None:
            await asyncio.sleep(0.5)
            received.append(record)

        sink = DatabaseSink(slow_receiver)
        started = time.perf_counter()
        sink.accept({"message": "a"}, level="info")
        elapsed = time.perf_counter() - started

        assert elapsed < 0.1
        assert received == []
        sink.wait(timeout=5.0)
        assert [r["message"] for r in received] == ["a"]
        sink.close()

    def test_log_call_does_not_wait_for_slow_receiver(self) -> None:
        async def slow_receiver(record: dict[str, Any]) -> None:
            await asyncio.sleep(0.5)

        sink = DatabaseSink(slow_receiver)
        core = LoggerCore([SinkRegistration(sink, LogLevel.SILLY, formats.json)])
        started = time.perf_counter()
        core.log(MessageEvent("info", "x"))
        assert time.perf_counter() - started < 0.1
        core.close()

    def test_close_waits_for_in_flight_writes(self) -> None:
        received: list[dict[str, Any]] = []

        async def receiver(record: dict[str, Any]) -> None:
            await asyncio.sleep(0.05)
            received.append(record)

        sink = DatabaseSink(receiver)
        sink.accept({"message": "a"}, level="info")
        sink.accept({"message": "b"}, level="info")
        sink.close()

        assert sorted(r["message"] for r in received) == ["a", "b"]

    def test_background_failure_is_reported(self) -> None:
        async def receiver(record: dict[str, Any]) -> None:
            raise ConnectionError("db down")

        sink = DatabaseSink(receiver)
        with capture_logs() as logs:
            sink.accept({"message": "a"}, level="info")
            sink.wait(timeout=5.0)
        sink.close()

        assert any(e["event"] == "database.receiver_failed" for e in logs)
