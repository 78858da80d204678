"""Sink adapters – one uniform ``accept`` contract per transport."""
from mp_logfan.sinks.ports import SinkAdapter
from mp_logfan.sinks.console import ConsoleSink
from mp_logfan.sinks.file import RotatingFileSink
from mp_logfan.sinks.search_index import INDEX_TEMPLATE, SearchIndexSink
from mp_logfan.sinks.database import DatabaseSink, Receiver

__all__ = [
    "ConsoleSink",
    "DatabaseSink",
    "INDEX_TEMPLATE",
    "Receiver",
    "RotatingFileSink",
    "SearchIndexSink",
    "SinkAdapter",
]
