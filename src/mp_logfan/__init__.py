"""
mp_logfan – fan-out logging facade with tracing correlation.

Import path convention::

    from mp_logfan import get_logger, MessageEvent, ErrorEvent
    from mp_logfan.sinks import ConsoleSink, RotatingFileSink
    from mp_logfan.adapters.opentelemetry import OtelApm
"""
from mp_logfan.accessor import LoggerAccessor, build_logger, configure, get_logger
from mp_logfan.core import LoggerCore, SinkRegistration
from mp_logfan.events import ErrorEvent, ErrorInfo, LogEvent, MessageEvent, NormalizedRecord
from mp_logfan.levels import LogLevel

__version__ = "0.1.0"
__all__ = [
    "ErrorEvent",
    "ErrorInfo",
    "LogEvent",
    "LogLevel",
    "LoggerAccessor",
    "LoggerCore",
    "MessageEvent",
    "NormalizedRecord",
    "SinkRegistration",
    "__version__",
    "build_logger",
    "configure",
    "get_logger",
]
