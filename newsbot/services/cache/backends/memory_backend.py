"""In-memory key-value TTL store for development and testing."""

import math
import time
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Callable, Optional, List, Dict

from newsbot.services.cache.backends.base import ICacheBackend, TTL_MISSING, TTL_PERSISTENT
from newsbot.core.errors import StoreUnavailableError


@dataclass
class StoreEntry:
    """A stored value with optional expiration."""

    value: str
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        """Check if the entry has expired."""
        if self.expires_at is None:
            return False
        return now >= self.expires_at


class MemoryBackend(ICacheBackend):
    """In-memory store that mimics the Redis commands the service uses.

    Useful for unit tests and local development without Redis. Expired
    entries are dropped lazily on access. ``clock`` can be replaced to move
    time forward in tests.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        """Initialize memory backend.

        Args:
            clock: Source of the current time in seconds.
        """
        self._storage: Dict[str, StoreEntry] = {}
        self._enabled = False
        self._clock = clock

    @property
    def enabled(self) -> bool:
        """Check if the backend is enabled."""
        return self._enabled

    async def connect(self) -> None:
        """Enable the backend."""
        self._enabled = True

    async def disconnect(self) -> None:
        """Disable the backend and clear storage."""
        self._enabled = False
        self._storage.clear()

    def _require_enabled(self, operation: str) -> None:
        if not self._enabled:
            raise StoreUnavailableError("Memory store is not connected", operation=operation)

    def _live_entry(self, key: str) -> Optional[StoreEntry]:
        entry = self._storage.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            del self._storage[key]
            return None

        return entry

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, entry in self._storage.items() if entry.is_expired(now)]
        for key in expired:
            del self._storage[key]

    async def ping(self) -> bool:
        self._require_enabled("ping")
        return True

    async def get(self, key: str) -> Optional[str]:
        self._require_enabled("get")
        entry = self._live_entry(key)
        return entry.value if entry else None

    async def set(
        self,
        key: str,
        value: str,
        ttl: Optional[int] = None,
        only_if_absent: bool = False
    ) -> bool:
        self._require_enabled("set")
        if only_if_absent and self._live_entry(key) is not None:
            return False

        expires_at = None
        if ttl is not None:
            expires_at = self._clock() + ttl

        self._storage[key] = StoreEntry(value=value, expires_at=expires_at)
        return True

    async def delete(self, *keys: str) -> int:
        self._require_enabled("delete")
        removed = 0
        for key in keys:
            if self._live_entry(key) is not None:
                del self._storage[key]
                removed += 1
        return removed

    async def exists(self, key: str) -> bool:
        self._require_enabled("exists")
        return self._live_entry(key) is not None

    async def ttl(self, key: str) -> int:
        self._require_enabled("ttl")
        entry = self._live_entry(key)
        if entry is None:
            return TTL_MISSING
        if entry.expires_at is None:
            return TTL_PERSISTENT
        return int(math.ceil(entry.expires_at - self._clock()))

    async def ttl_many(self, keys: List[str]) -> Dict[str, int]:
        return {key: await self.ttl(key) for key in keys}

    async def expire(self, key: str, ttl: int) -> bool:
        self._require_enabled("expire")
        entry = self._live_entry(key)
        if entry is None:
            return False
        entry.expires_at = self._clock() + ttl
        return True

    async def keys(self, pattern: str = "*") -> List[str]:
        self._require_enabled("keys")
        self._purge_expired()
        return [key for key in self._storage if fnmatchcase(key, pattern)]

    async def memory_usage(self) -> int:
        """Rough byte count of stored keys and values."""
        self._require_enabled("info")
        self._purge_expired()
        return sum(
            len(key.encode("utf-8")) + len(entry.value.encode("utf-8"))
            for key, entry in self._storage.items()
        )

    # Testing utilities

    def get_entry_count(self) -> int:
        """Get the number of live entries (testing utility)."""
        self._purge_expired()
        return len(self._storage)
