"""
Redis Storage Backend.

Shares cached resolutions across processes. Requires the redis package
(`pip install nnsresolver[redis]`).
"""

from __future__ import annotations

import json
import os
from typing import Any

from nnsresolver.storage.base import StorageBackend, register_storage_backend


class RedisStorage(StorageBackend):
    """
    Redis storage backend.

    Records are JSON strings under `{prefix}:{collection}:{key}`; a set at
    `{prefix}:{collection}:_index` tracks the keys of each collection.
    A `ttl` passed to `save` becomes a native Redis expiry.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        prefix: str = "nnsresolver",
    ) -> None:
        """
        Initialize Redis storage.

        Args:
            redis_url: Redis connection URL (or from NNS_REDIS_URL env)
            prefix: Key prefix for all storage keys
        """
        self._redis_url = redis_url or os.environ.get(
            "NNS_REDIS_URL",
            "redis://localhost:6379/0",
        )
        self._prefix = prefix
        self._client = None

    def _get_client(self):
        """Lazy-load Redis client."""
        if self._client is None:
            try:
                import redis.asyncio as redis
            except ImportError:
                raise ImportError(
                    "redis package required for RedisStorage. Install with: pip install redis"
                ) from None
            self._client = redis.from_url(self._redis_url, decode_responses=True)
        return self._client

    def _make_key(self, collection: str, key: str) -> str:
        """Create Redis key from collection and key."""
        return f"{self._prefix}:{collection}:{key}"

    def _index_key(self, collection: str) -> str:
        return f"{self._prefix}:{collection}:_index"

    async def save(
        self,
        collection: str,
        key: str,
        data: dict[str, Any],
        ttl: int | None = None,
    ) -> None:
        """Save data to Redis."""
        client = self._get_client()
        await client.set(self._make_key(collection, key), json.dumps(data), ex=ttl or None)
        await client.sadd(self._index_key(collection), key)

    async def get(
        self,
        collection: str,
        key: str,
    ) -> dict[str, Any] | None:
        """Get data from Redis."""
        client = self._get_client()
        data = await client.get(self._make_key(collection, key))

        if data is None:
            return None

        try:
            return json.loads(data)
        except json.JSONDecodeError:
            return None

    async def delete(
        self,
        collection: str,
        key: str,
    ) -> bool:
        """Delete data from Redis."""
        client = self._get_client()
        result = await client.delete(self._make_key(collection, key))
        await client.srem(self._index_key(collection), key)
        return result > 0

    async def count(self, collection: str) -> int:
        """Count records in collection (expired keys are pruned from the index first)."""
        client = self._get_client()
        index_key = self._index_key(collection)
        keys = await client.smembers(index_key)
        live = 0
        for key in keys:
            if await client.exists(self._make_key(collection, key)):
                live += 1
            else:
                await client.srem(index_key, key)
        return live

    async def clear(self, collection: str) -> int:
        """Clear all records from a collection."""
        client = self._get_client()
        keys = await client.smembers(self._index_key(collection))

        count = 0
        for key in keys:
            if await self.delete(collection, key):
                count += 1
        await client.delete(self._index_key(collection))
        return count

    async def health_check(self) -> bool:
        """Check Redis connection."""
        try:
            client = self._get_client()
            await client.ping()
            return True
        except Exception:
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None


# Register backend
register_storage_backend("redis", RedisStorage)
