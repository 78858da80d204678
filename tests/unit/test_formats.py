"""Unit tests for the cli / file / json format pipelines."""
from __future__ import annotations

import json
import re
from datetime import UTC, datetime
from decimal import Decimal

from mp_logfan import formats
from mp_logfan.events import NormalizedRecord
from mp_logfan.levels import LogLevel

NOW = datetime(2026, 1, 1, 12, 0, 5, tzinfo=UTC)
_ANSI = re.compile(r"\x1b\[[0-9;]*m")


def _record(**kwargs: object) -> NormalizedRecord:
    base: dict[str, object] = {"level": "info", "message": "user created", "timestamp": NOW}
    base.update(kwargs)
    return NormalizedRecord(**base)  # type: ignore[arg-type]


class TestCliFormat:
    def test_is_colorized(self) -> None:
        line = formats.cli(_record())
        assert "\x1b[" in line

    def test_contains_timestamp_level_message(self) -> None:
        plain = _ANSI.sub("", formats.cli(_record()))
        assert "2026-01-01 12:00:05" in plain
        assert "info" in plain
        assert "user created" in plain

    def test_keeps_extra_and_trace_fields(self) -> None:
        plain = _ANSI.sub("", formats.cli(_record(trace_id="abc", extra={"user_id": 42})))
        assert "user_id=42" in plain
        assert "trace_id=abc" in plain

    def test_every_level_has_a_style(self) -> None:
        for level in LogLevel:
            assert level.value in formats.LEVEL_STYLES
            assert "\x1b[" in formats.cli(_record(level=level))

    def test_is_single_line(self) -> None:
        assert "\n" not in formats.cli(_record(extra={"a": 1}))

    def test_colliding_extra_keys_keep_message_and_names(self) -> None:
        line = formats.cli(_record(message="real message", extra={"event": "signup", "exception": "a\nb"}))
        plain = _ANSI.sub("", line)
        assert "real message" in plain
        assert "extra.event=signup" in plain
        assert "extra.exception=a\\nb" in plain
        assert "\n" not in line

    def test_renderer_layout_keys_are_renamed(self) -> None:
        extra = {"stack": "s", "exc_info": True, "logger": "app", "logger_name": "app.db"}
        plain = _ANSI.sub("", formats.cli(_record(extra=extra)))
        for key in extra:
            assert f"extra.{key}=" in plain

    def test_renamed_key_does_not_clobber_existing_one(self) -> None:
        plain = _ANSI.sub("", formats.cli(_record(extra={"event": 1, "extra.event": 2})))
        assert "extra.event=1" in plain
        assert "extra.extra.event=2" in plain

    def test_multiline_message_and_stack_stay_on_one_line(self) -> None:
        line = formats.cli(_record(message="first\nsecond", extra={"stack_trace": "Traceback\n  line 1"}))
        assert "\n" not in line
        assert "first\\nsecond" in _ANSI.sub("", line)

    def test_does_not_mutate_record(self) -> None:
        record = _record(extra={"a": 1})
        formats.cli(record)
        assert record.as_dict()["a"] == 1


class TestFileFormat:
    def test_leading_key_order_is_stable(self) -> None:
        line = formats.file(_record(trace_id="t", transaction_id="tx", extra={"b": 2, "a": 1}))
        assert line == (
            "timestamp='2026-01-01 12:00:05' level='info' message='user created' "
            "trace_id='t' transaction_id='tx' b=2 a=1"
        )

    def test_missing_trace_fields_are_omitted(self) -> None:
        line = formats.file(_record())
        assert "trace_id" not in line
        assert line.startswith("timestamp='2026-01-01 12:00:05' level='info'")

    def test_no_ansi_codes(self) -> None:
        assert "\x1b[" not in formats.file(_record())

    def test_arbitrary_keys_kept(self) -> None:
        line = formats.file(_record(extra={"weird key": {"nested": [1, 2]}}))
        assert "weird key={'nested': [1, 2]}" in line


class TestJsonFormat:
    def test_preserves_every_field(self) -> None:
        payload = formats.json(_record(trace_id="t", extra={"user_id": 42, "tags": ("a", "b")}))
        assert payload == {
            "level": "info",
            "message": "user created",
            "trace_id": "t",
            "timestamp": "2026-01-01T12:00:05+00:00",
            "user_id": 42,
            "tags": ["a", "b"],
        }

    def test_non_json_values_are_stringified(self) -> None:
        payload = formats.json(_record(extra={"amount": Decimal("1.50"), "level_enum": LogLevel.WARN}))
        assert payload["amount"] == "1.50"
        assert payload["level_enum"] == "warn"

    def test_render_json_round_trips(self) -> None:
        payload = formats.json(_record(extra={"k": "v"}))
        assert json.loads(formats.render_json(payload)) == payload

    def test_result_is_independent_of_record(self) -> None:
        record = _record(extra={"nested": {"a": 1}})
        payload = formats.json(record)
        payload["nested"]["a"] = 2
        assert record.extra["nested"]["a"] == 1
