"""Search-index sink – bulk indexes json payloads into Elasticsearch."""
from __future__ import annotations

import copy
import threading
from datetime import UTC, datetime
from typing import Any

import httpx

from mp_logfan.diagnostics import report
from mp_logfan.errors import SinkWriteError
from mp_logfan.formats import render_json
from mp_logfan.sinks.ports import SinkAdapter

#: Index template installed once per sink; never derived from records.
INDEX_TEMPLATE: dict[str, Any] = {
    "index_patterns": ["logs-*"],
    "settings": {
        "number_of_shards": 1,
        "number_of_replicas": 0,
        "index": {
            "refresh_interval": "5s",
        },
    },
    "mappings": {
        "_source": {"enabled": True},
    },
}


class SearchIndexSink(SinkAdapter):
    """Buffer documents and ship them with the ``_bulk`` API.

    A daemon thread flushes every *flush_interval* seconds, or as soon as
    *batch_size* documents are waiting.  Before the first bulk request the
    fixed :data:`INDEX_TEMPLATE` is installed under ``_index_template/<prefix>``.
    A failed request is reported to the diagnostics logger and its batch is
    dropped.

    Each document gets ECS correlation fields ``trace.id`` and
    ``transaction.id`` when the record carries them, so the APM UI can link
    log lines to traces.

    Parameters
    ----------
    url:
        Elasticsearch base URL.
    username / password:
        Basic auth credentials (optional).
    index_prefix:
        Documents go to ``<prefix>-YYYY.MM.DD``.
    client:
        Pre-built :class:`httpx.Client`; built from *url* when omitted.
    start:
        Start the background flusher immediately.
    """

    name = "search_index"

    def __init__(
        self,
        url: str,
        *,
        username: str | None = None,
        password: str | None = None,
        index_prefix: str = "logs",
        template: dict[str, Any] | None = None,
        batch_size: int = 100,
        flush_interval: float = 2.0,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
        start: bool = True,
    ) -> None:
        auth = (username, password or "") if username else None
        self._client = client or httpx.Client(base_url=url.rstrip("/"), auth=auth, timeout=timeout)
        self._index_prefix = index_prefix
        self._template = copy.deepcopy(template or INDEX_TEMPLATE)
        self._batch_size = max(1, batch_size)
        self._flush_interval = flush_interval

        self._buffer: list[dict[str, Any]] = []
        self._lock = threading.Lock()
        self._flush_lock = threading.Lock()
        self._template_installed = False
        self._wake = threading.Event()
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None
        if start:
            self.start()

    @property
    def template(self) -> dict[str, Any]:
        return copy.deepcopy(self._template)

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run,
            daemon=True,
            name="logfan-search-index",
        )
        self._thread.start()

    def accept(self, payload: Any, *, level: str) -> None:  # noqa: ARG002
        if self._stopped.is_set():
            report("search_index.closed", dropped=1)
            return
        doc = self._to_document(payload)
        with self._lock:
            self._buffer.append(doc)
            full = len(self._buffer) >= self._batch_size
        if full:
            self._wake.set()

    def flush(self) -> None:
        with self._flush_lock:
            with self._lock:
                batch, self._buffer = self._buffer, []
            if not batch:
                return
            try:
                self._ensure_template(len(batch))
                self._bulk(batch)
            except SinkWriteError as exc:
                report("search_index.flush_failed", exc=exc)
            except Exception as exc:  # noqa: BLE001
                report("search_index.flush_failed", exc=exc, dropped=len(batch))

    def close(self) -> None:
        self._stopped.set()
        self._wake.set()
        if self._thread is not None:
            self._thread.join(timeout=self._flush_interval + 5.0)
            self._thread = None
        self.flush()
        self._client.close()

    def _run(self) -> None:
        while not self._stopped.is_set():
            self._wake.wait(self._flush_interval)
            self._wake.clear()
            self.flush()

    def _ensure_template(self, pending: int) -> None:
        if self._template_installed:
            return
        body = {
            "index_patterns": self._template["index_patterns"],
            "template": {
                "settings": self._template["settings"],
                "mappings": self._template["mappings"],
            },
        }
        response = self._client.put(f"/_index_template/{self._index_prefix}", json=body)
        self._raise_for_status(response, "index template rejected", dropped=pending)
        self._template_installed = True

    def _bulk(self, batch: list[dict[str, Any]]) -> None:
        lines: list[str] = []
        for doc in batch:
            lines.append(render_json({"index": {"_index": self._index_name(doc)}}))
            lines.append(render_json(doc))
        response = self._client.post(
            "/_bulk",
            content=("\n".join(lines) + "\n").encode("utf-8"),
            headers={"Content-Type": "application/x-ndjson"},
        )
        self._raise_for_status(response, "bulk request rejected", dropped=len(batch))
        body = response.json()
        if body.get("errors"):
            failed = sum(
                1 for item in body.get("items", []) if any("error" in op for op in item.values())
            )
            raise SinkWriteError(self.name, "bulk request had item errors", dropped=failed)

    def _raise_for_status(self, response: httpx.Response, message: str, *, dropped: int = 0) -> None:
        if response.is_error:
            raise SinkWriteError(
                self.name,
                f"{message}: HTTP {response.status_code}",
                status_code=response.status_code,
                dropped=dropped,
            )

    def _index_name(self, doc: dict[str, Any]) -> str:
        try:
            ts = datetime.fromisoformat(str(doc["@timestamp"]))
        except (KeyError, ValueError):
            ts = datetime.now(UTC)
        return f"{self._index_prefix}-{ts.strftime('%Y.%m.%d')}"

    @staticmethod
    def _to_document(payload: Any) -> dict[str, Any]:
        doc = dict(payload)
        if "timestamp" in doc:
            doc["@timestamp"] = doc["timestamp"]
        if doc.get("trace_id") is not None:
            doc["trace"] = {"id": doc["trace_id"]}
        if doc.get("transaction_id") is not None:
            doc["transaction"] = {"id": doc["transaction_id"]}
        return doc


__all__ = ["INDEX_TEMPLATE", "SearchIndexSink"]
