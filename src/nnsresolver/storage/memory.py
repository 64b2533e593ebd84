"""
In-Memory Storage Backend.

Default storage backend that keeps all data in memory.
Suitable for a single process; data is lost when the process ends.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from nnsresolver.storage.base import StorageBackend, register_storage_backend


class InMemoryStorage(StorageBackend):
    """
    In-memory storage backend.

    Stores all data in Python dicts. The `ttl` hint is ignored; expiry is
    tracked by the cache layer inside each record.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, dict[str, Any]]] = {}

    def _ensure_collection(self, collection: str) -> dict[str, dict[str, Any]]:
        """Ensure collection exists and return it."""
        if collection not in self._data:
            self._data[collection] = {}
        return self._data[collection]

    async def save(
        self,
        collection: str,
        key: str,
        data: dict[str, Any],
        ttl: int | None = None,
    ) -> None:
        """Save data to memory."""
        coll = self._ensure_collection(collection)
        coll[key] = deepcopy(data)

    async def get(
        self,
        collection: str,
        key: str,
    ) -> dict[str, Any] | None:
        """Get data from memory."""
        coll = self._ensure_collection(collection)
        data = coll.get(key)
        return deepcopy(data) if data else None

    async def delete(
        self,
        collection: str,
        key: str,
    ) -> bool:
        """Delete data from memory."""
        coll = self._ensure_collection(collection)
        if key in coll:
            del coll[key]
            return True
        return False

    async def count(self, collection: str) -> int:
        """Count records in collection."""
        return len(self._ensure_collection(collection))

    async def clear(self, collection: str) -> int:
        """Clear all records from a collection."""
        coll = self._ensure_collection(collection)
        count = len(coll)
        coll.clear()
        return count


# Register as default backend
register_storage_backend("memory", InMemoryStorage)
