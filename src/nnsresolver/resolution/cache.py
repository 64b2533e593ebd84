"""
Resolution Cache: TTL-based caching for name lookups.

Uses StorageBackend (in-memory or Redis). Only positive results are stored:
a name without a record is looked up again next time.
"""

from __future__ import annotations

import time
from typing import Any, Awaitable, Callable

from nnsresolver.core.logging import get_logger
from nnsresolver.storage.base import StorageBackend

logger = get_logger("resolution.cache")

FORWARD = "forward"
REVERSE = "reverse"

COLLECTION = "resolution_cache"


class ResolutionCache:
    """
    TTL-based cache backed by StorageBackend.

    Key pattern: nns:{chain_id}:{name}:{data_type}
    """

    def __init__(self, storage: StorageBackend, ttl: int = 300) -> None:
        self._storage = storage
        self._ttl = ttl

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    @staticmethod
    def _key(chain_id: int, name: str, data_type: str) -> str:
        """Build cache key."""
        return f"nns:{chain_id}:{name.lower()}:{data_type}"

    async def get(
        self,
        chain_id: int,
        name: str,
        data_type: str = FORWARD,
    ) -> dict[str, Any] | None:
        """
        Get cached value if not expired.

        Returns None on miss or expiry.
        """
        if not self.enabled:
            return None

        key = self._key(chain_id, name, data_type)
        entry = await self._storage.get(COLLECTION, key)

        if entry is None:
            return None

        expires_at = entry.get("_expires_at", 0)
        if time.time() > expires_at:
            await self._storage.delete(COLLECTION, key)
            return None

        return entry.get("data")

    async def set(
        self,
        chain_id: int,
        name: str,
        data: dict[str, Any],
        data_type: str = FORWARD,
        ttl: int | None = None,
    ) -> None:
        """Store value with TTL (defaults to the cache-wide TTL)."""
        if not self.enabled:
            return
        ttl = self._ttl if ttl is None else ttl
        key = self._key(chain_id, name, data_type)
        await self._storage.save(
            COLLECTION,
            key,
            {
                "data": data,
                "_expires_at": time.time() + ttl,
                "_data_type": data_type,
            },
            ttl=ttl,
        )

    async def invalidate(
        self,
        chain_id: int,
        name: str,
        data_type: str | None = None,
    ) -> None:
        """Invalidate cache for a name (all types or specific type)."""
        types = (data_type,) if data_type else (FORWARD, REVERSE)
        for dt in types:
            await self._storage.delete(COLLECTION, self._key(chain_id, name, dt))

    async def clear(self) -> int:
        return await self._storage.clear(COLLECTION)

    async def get_or_fetch(
        self,
        chain_id: int,
        name: str,
        fetch_fn: Callable[[], Awaitable[dict[str, Any] | None]],
        data_type: str = FORWARD,
    ) -> tuple[dict[str, Any] | None, bool]:
        """
        Get from cache or fetch and store.

        Returns:
            Tuple of (data, cache_hit)
        """
        cached = await self.get(chain_id, name, data_type)
        if cached is not None:
            logger.debug(f"Cache hit for {name} ({data_type})")
            return cached, True

        data = await fetch_fn()
        if data is not None:
            await self.set(chain_id, name, data, data_type)

        return data, False


__all__ = ["ResolutionCache", "FORWARD", "REVERSE"]
