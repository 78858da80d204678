"""Testing – in-memory doubles for sinks, the APM capability and the clock."""
from mp_logfan.testing.fakes import FailingSink, FakeApm, FrozenClock, RecordingSink

__all__ = ["FailingSink", "FakeApm", "FrozenClock", "RecordingSink"]
