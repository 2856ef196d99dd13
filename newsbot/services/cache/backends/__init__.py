"""Key-value store backends.

Provides different storage backends for the cache and session layers:
- RedisBackend: Production Redis store
- MemoryBackend: In-process store for development and testing
"""

from newsbot.core.config import Settings
from newsbot.services.cache.backends.base import ICacheBackend, TTL_MISSING, TTL_PERSISTENT
from newsbot.services.cache.backends.redis_backend import RedisBackend
from newsbot.services.cache.backends.memory_backend import MemoryBackend


def create_backend(settings: Settings) -> ICacheBackend:
    """Build the backend selected by ``settings.store_backend``."""
    if settings.store_backend == "memory":
        return MemoryBackend()
    return RedisBackend.from_settings(settings)


__all__ = [
    "ICacheBackend",
    "TTL_MISSING",
    "TTL_PERSISTENT",
    "RedisBackend",
    "MemoryBackend",
    "create_backend",
]
