"""
Abstract Storage Backend for nnsresolver.

Provides the pluggable persistence layer behind the resolution cache.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    Provides simple key/value operations grouped by collection.
    Implementations can use any persistence layer (memory, Redis, ...).
    """

    @abstractmethod
    async def save(
        self,
        collection: str,
        key: str,
        data: dict[str, Any],
        ttl: int | None = None,
    ) -> None:
        """
        Save data to storage.

        Args:
            collection: Collection name
            key: Unique key for the record
            data: Data to store (must be JSON-serializable)
            ttl: Optional expiry hint in seconds; backends with native
                 expiry use it, others may ignore it
        """
        ...

    @abstractmethod
    async def get(
        self,
        collection: str,
        key: str,
    ) -> dict[str, Any] | None:
        """
        Get data from storage.

        Returns:
            Data dict or None if not found
        """
        ...

    @abstractmethod
    async def delete(
        self,
        collection: str,
        key: str,
    ) -> bool:
        """
        Delete data from storage.

        Returns:
            True if deleted, False if not found
        """
        ...

    @abstractmethod
    async def count(self, collection: str) -> int:
        """Count records in collection."""
        ...

    @abstractmethod
    async def clear(self, collection: str) -> int:
        """
        Clear all records from a collection.

        Returns:
            Number of records deleted
        """
        ...

    async def health_check(self) -> bool:
        """
        Check if storage is healthy and connected.

        Returns:
            True if healthy
        """
        return True

    async def close(self) -> None:
        """Release any connection held by the backend."""
        return None


# Storage backend registry for dependency injection
_STORAGE_BACKENDS: dict[str, type[StorageBackend]] = {}


def register_storage_backend(name: str, backend_class: type[StorageBackend]) -> None:
    """Register a storage backend by name."""
    _STORAGE_BACKENDS[name] = backend_class


def get_storage_backend(name: str) -> type[StorageBackend] | None:
    """Get a registered storage backend by name."""
    return _STORAGE_BACKENDS.get(name)


def list_storage_backends() -> list[str]:
    """List all registered storage backend names."""
    return list(_STORAGE_BACKENDS.keys())
