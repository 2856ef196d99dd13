"""Base interface for key-value TTL store backends."""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict

# TTL sentinels, same meaning as the Redis TTL command
TTL_MISSING = -2
TTL_PERSISTENT = -1


class ICacheBackend(ABC):
    """Abstract base class for key-value stores with per-key expiry.

    Values are plain strings; serialization belongs to the caller. Every
    operation raises ``StoreUnavailableError`` when the store cannot be
    reached, so callers decide whether a failure is fatal.
    """

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Check if the backend is connected."""
        ...

    @abstractmethod
    async def connect(self) -> None:
        """Acquire the store connection."""
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the store connection."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Round-trip check against the store."""
        ...

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Get the raw value stored under ``key``, or None."""
        ...

    @abstractmethod
    async def set(
        self,
        key: str,
        value: str,
        ttl: Optional[int] = None,
        only_if_absent: bool = False
    ) -> bool:
        """Store ``value`` under ``key``.

        Args:
            key: The key.
            value: Raw string value.
            ttl: Time-to-live in seconds; every write re-arms it.
            only_if_absent: Write only when the key does not exist (SET NX).

        Returns:
            True if the value was written.
        """
        ...

    @abstractmethod
    async def delete(self, *keys: str) -> int:
        """Delete keys in one batch and return how many existed."""
        ...

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if a key exists."""
        ...

    @abstractmethod
    async def ttl(self, key: str) -> int:
        """Remaining seconds, ``TTL_PERSISTENT`` or ``TTL_MISSING``."""
        ...

    @abstractmethod
    async def ttl_many(self, keys: List[str]) -> Dict[str, int]:
        """TTL of several keys in one round-trip where the store allows it."""
        ...

    @abstractmethod
    async def expire(self, key: str, ttl: int) -> bool:
        """Re-arm expiry on an existing key; False if the key is absent."""
        ...

    @abstractmethod
    async def keys(self, pattern: str = "*") -> List[str]:
        """Keys matching a glob pattern."""
        ...

    @abstractmethod
    async def memory_usage(self) -> int:
        """Approximate bytes used by the store."""
        ...
