"""Unit tests for the console and rotating file sinks."""
from __future__ import annotations

import io
import pathlib
import threading

import pytest

from mp_logfan.sinks import ConsoleSink, RotatingFileSink


class TestConsoleSink:
    def test_info_goes_to_stdout(self) -> None:
        out, err = io.StringIO(), io.StringIO()
        ConsoleSink(stdout=out, stderr=err).accept("hello", level="info")
        assert out.getvalue() == "hello\n"
        assert err.getvalue() == ""

    @pytest.mark.parametrize("level", ["error", "warn"])
    def test_error_and_warn_go_to_stderr(self, level: str) -> None:
        out, err = io.StringIO(), io.StringIO()
        ConsoleSink(stdout=out, stderr=err).accept("oops", level=level)
        assert err.getvalue() == "oops\n"
        assert out.getvalue() == ""

    @pytest.mark.parametrize("level", ["ERROR", "Warn"])
    def test_stderr_routing_ignores_case(self, level: str) -> None:
        out, err = io.StringIO(), io.StringIO()
        ConsoleSink(stdout=out, stderr=err).accept("oops", level=level)
        assert err.getvalue() == "oops\n"
        assert out.getvalue() == ""

    def test_defaults_to_process_streams(self, capsys: pytest.CaptureFixture[str]) -> None:
        sink = ConsoleSink()
        sink.accept("to out", level="debug")
        sink.accept("to err", level="error")
        captured = capsys.readouterr()
        assert captured.out == "to out\n"
        assert captured.err == "to err\n"

    def test_close_does_not_close_streams(self) -> None:
        out = io.StringIO()
        ConsoleSink(stdout=out, stderr=out).close()
        assert not out.closed


class TestRotatingFileSink:
    def test_creates_directory_and_appends_lines(self, tmp_path: pathlib.Path) -> None:
        sink = RotatingFileSink(tmp_path / "nested" / "logs", "app.log")
        sink.accept("line one", level="info")
        sink.accept("line two", level="verbose")
        sink.close()

        assert sink.path == (tmp_path / "nested" / "logs" / "app.log").resolve()
        assert sink.path.read_text(encoding="utf-8") == "line one\nline two\n"

    def test_file_opened_lazily(self, tmp_path: pathlib.Path) -> None:
        sink = RotatingFileSink(tmp_path, "lazy.log")
        assert not sink.path.exists()
        sink.accept("x", level="info")
        sink.flush()
        assert sink.path.exists()
        sink.close()

    def test_percent_signs_are_literal(self, tmp_path: pathlib.Path) -> None:
        sink = RotatingFileSink(tmp_path, "pct.log")
        sink.accept("100% done %s", level="info")
        sink.close()
        assert sink.path.read_text(encoding="utf-8") == "100% done %s\n"

    def test_concurrent_writes_keep_lines_whole(self, tmp_path: pathlib.Path) -> None:
        sink = RotatingFileSink(tmp_path, "concurrent.log")

        def write(n: int) -> None:
            for i in range(50):
                sink.accept(f"worker={n} i={i}", level="info")

        threads = [threading.Thread(target=write, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        sink.close()

        lines = sink.path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 200
        assert all(line.startswith("worker=") for line in lines)
