"""MongoDB adapter – MongoLogReceiver for the database sink."""
from __future__ import annotations

from datetime import datetime
from typing import Any


class MongoLogReceiver:
    """Insert each log record into a MongoDB collection.

    *collection* is a Motor (``AsyncIOMotorCollection``) or any object with
    an async ``insert_one``.  The ISO ``timestamp`` is stored as a BSON date
    so TTL indexes and range queries work.

    Usage::

        client = AsyncIOMotorClient(url)
        receiver = MongoLogReceiver(client["app"]["logs"])
        configure(receiver=receiver)
    """

    def __init__(self, collection: Any) -> None:
        self._col = collection

    async def __call__(self, record: dict[str, Any]) -> None:
        await self._col.insert_one(self._to_document(record))

    @staticmethod
    def _to_document(record: dict[str, Any]) -> dict[str, Any]:
        doc = dict(record)
        ts = doc.get("timestamp")
        if isinstance(ts, str):
            try:
                doc["timestamp"] = datetime.fromisoformat(ts)
            except ValueError:
                pass
        return doc


__all__ = ["MongoLogReceiver"]
