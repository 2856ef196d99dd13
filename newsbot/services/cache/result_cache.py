"""Categorized TTL result cache.

Every write picks its TTL from the entry's category:
- query: answered questions (1 hour by default)
- vector: retrieval artefacts (6 hours by default)
- session: session documents (24 hours by default)
- default: anything else (1 hour)

The cache never fails the caller: store errors are logged and turned into
a safe default (miss / False / 0), so a degraded store costs latency, not
correctness.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Any, Iterable, Union

from pydantic import ValidationError as PydanticValidationError

from newsbot.core.config import Settings
from newsbot.core.errors import StoreUnavailableError
from newsbot.core.logging import get_logger
from newsbot.models.cache import CachedAnswer, CacheStatsSnapshot
from newsbot.models.query import Source
from newsbot.services.cache.backends.base import ICacheBackend, TTL_MISSING
from newsbot.services.cache.key_generator import CacheKeyGenerator

logger = get_logger(__name__)


class CacheCategory(str, Enum):
    """TTL policy categories."""
    QUERY = "query"
    VECTOR = "vector"
    SESSION = "session"
    DEFAULT = "default"


@dataclass
class CacheConfig:
    """TTLs per category, in seconds."""

    session_ttl: int = 86400  # 24 hours
    vector_ttl: int = 21600  # 6 hours
    query_ttl: int = 3600  # 1 hour
    default_ttl: int = 3600  # 1 hour

    @classmethod
    def from_settings(cls, settings: Settings) -> "CacheConfig":
        return cls(
            session_ttl=settings.session_ttl,
            vector_ttl=settings.vector_cache_ttl,
            query_ttl=settings.query_cache_ttl,
            default_ttl=settings.default_cache_ttl,
        )

    def ttl_for(self, category: Union[CacheCategory, str]) -> int:
        """TTL for a category; unknown categories get the default."""
        try:
            category = CacheCategory(category)
        except ValueError:
            return self.default_ttl

        if category == CacheCategory.SESSION:
            return self.session_ttl
        if category == CacheCategory.VECTOR:
            return self.vector_ttl
        if category == CacheCategory.QUERY:
            return self.query_ttl
        return self.default_ttl


@dataclass
class CacheCounters:
    """In-process hit/miss/error counters."""

    hits: int = 0
    misses: int = 0
    errors: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    def record_error(self) -> None:
        self.errors += 1


class ResultCache:
    """Result cache on top of a key-value TTL store.

    Usage:
        backend = RedisBackend.from_settings(settings)
        await backend.connect()

        cache = ResultCache(backend, CacheConfig.from_settings(settings))

        await cache.put("query:...", {"answer": "..."}, "query")
        value = await cache.get("query:...")

        cached = await cache.get_cached_answer("latest news")
    """

    def __init__(
        self,
        backend: ICacheBackend,
        config: Optional[CacheConfig] = None
    ):
        """Initialize result cache.

        Args:
            backend: The key-value store (Redis, memory).
            config: Optional TTL configuration.
        """
        self.backend = backend
        self.config = config or CacheConfig()
        self.key_generator = CacheKeyGenerator
        self._counters = CacheCounters()

    @property
    def counters(self) -> CacheCounters:
        return self._counters

    def _failed(self, operation: str, key: Optional[str], error: Exception) -> None:
        self._counters.record_error()
        logger.error("Cache: Error during %s for %s: %s", operation, key, error)

    @staticmethod
    def _serialize(value: Any) -> str:
        if isinstance(value, str):
            return value
        return json.dumps(value, default=str)

    @staticmethod
    def _deserialize(raw: str) -> Any:
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            # Plain strings written by other clients
            return raw

    # =========================================================================
    # Generic operations
    # =========================================================================

    async def put(
        self,
        key: str,
        value: Any,
        category: Union[CacheCategory, str] = CacheCategory.DEFAULT
    ) -> bool:
        """Serialize and store ``value`` with its category's TTL.

        Returns:
            True if cached, False if the store rejected the write.
        """
        ttl = self.config.ttl_for(category)
        category_name = category.value if isinstance(category, CacheCategory) else category
        try:
            await self.backend.set(key, self._serialize(value), ttl)
        except StoreUnavailableError as e:
            self._failed("set", key, e)
            return False

        logger.debug("Cache: Set %s with TTL %ss (category: %s)", key, ttl, category_name)
        return True

    async def get(self, key: str) -> Optional[Any]:
        """Get a cached value, or None when absent or unreachable."""
        try:
            raw = await self.backend.get(key)
        except StoreUnavailableError as e:
            self._failed("get", key, e)
            return None

        if raw is None:
            self._counters.record_miss()
            return None

        self._counters.record_hit()
        return self._deserialize(raw)

    async def delete(self, key: str) -> bool:
        try:
            await self.backend.delete(key)
        except StoreUnavailableError as e:
            self._failed("delete", key, e)
            return False

        logger.debug("Cache: Deleted %s", key)
        return True

    async def exists(self, key: str) -> bool:
        try:
            return await self.backend.exists(key)
        except StoreUnavailableError as e:
            self._failed("exists", key, e)
            return False

    async def get_ttl(self, key: str) -> int:
        """Remaining TTL; -2 when absent or unreachable, -1 when persistent."""
        try:
            return await self.backend.ttl(key)
        except StoreUnavailableError as e:
            self._failed("ttl", key, e)
            return TTL_MISSING

    async def set_ttl(self, key: str, ttl: int) -> bool:
        """Re-arm the TTL of an existing key."""
        try:
            updated = await self.backend.expire(key, ttl)
        except StoreUnavailableError as e:
            self._failed("expire", key, e)
            return False

        if updated:
            logger.debug("Cache: Set TTL %ss for %s", ttl, key)
        return updated

    async def clear_by_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob in one batch.

        Returns:
            Number of keys removed (0 when nothing matched or on error).
        """
        try:
            keys = await self.backend.keys(pattern)
            if not keys:
                return 0
            removed = await self.backend.delete(*keys)
        except StoreUnavailableError as e:
            self._failed("clear", pattern, e)
            return 0

        logger.info("Cache: Cleared %d keys matching %s", removed, pattern)
        return removed

    async def stats(self) -> Optional[CacheStatsSnapshot]:
        """Compute a statistics snapshot.

        Enumerates every key, so cost grows with the keyspace; meant for
        operators, not the request path.
        """
        try:
            keys = await self.backend.keys("*")
            ttls = await self.backend.ttl_many(keys)
            try:
                memory_usage = await self.backend.memory_usage()
            except StoreUnavailableError as e:
                logger.warning("Cache: Could not read memory info: %s", e)
                memory_usage = 0
        except StoreUnavailableError as e:
            self._failed("stats", None, e)
            return None

        snapshot = CacheStatsSnapshot(
            total_keys=len(keys),
            memory_usage=memory_usage,
            hits=self._counters.hits,
            misses=self._counters.misses,
            errors=self._counters.errors,
            hit_rate=self._counters.hit_rate,
        )

        prefixes = {
            f"{self.key_generator.SESSION_PREFIX}:": "sessions",
            f"{self.key_generator.QUERY_PREFIX}:": "queries",
            f"{self.key_generator.VECTOR_PREFIX}:": "vectors",
        }
        for key in keys:
            bucket = next(
                (name for prefix, name in prefixes.items() if key.startswith(prefix)),
                "other",
            )
            setattr(snapshot.categories, bucket, getattr(snapshot.categories, bucket) + 1)

            if ttls.get(key, TTL_MISSING) > 0:
                snapshot.keys_by_ttl.expiring += 1
            else:
                snapshot.keys_by_ttl.persistent += 1

        return snapshot

    # =========================================================================
    # Query answers
    # =========================================================================

    async def get_cached_answer(self, query: str) -> Optional[CachedAnswer]:
        """Look up the cached answer for a question."""
        key = self.key_generator.query(query)
        value = await self.get(key)
        if value is None:
            return None

        try:
            cached = CachedAnswer.model_validate(value)
        except PydanticValidationError:
            logger.warning("Cache: Ignoring malformed entry under %s", key)
            return None

        logger.info("Cache: Query result retrieved from cache for %r", query)
        return cached

    async def cache_answer(
        self,
        query: str,
        answer: str,
        sources: Iterable[Source],
        warmed: bool = False
    ) -> bool:
        """Store an answer under the ``query`` category."""
        entry = CachedAnswer(query=query, answer=answer, sources=list(sources), warmed=warmed)
        stored = await self.put(
            self.key_generator.query(query),
            entry.model_dump(mode="json"),
            CacheCategory.QUERY,
        )
        if stored:
            logger.info("Cache: Query result cached for %r (warmed=%s)", query, warmed)
        return stored

    async def is_query_cached(self, query: str) -> bool:
        return await self.exists(self.key_generator.query(query))
