"""Tests for the categorized result cache."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from newsbot.core.errors import StoreUnavailableError
from newsbot.models.query import Source
from newsbot.services.cache.backends.base import TTL_MISSING
from newsbot.services.cache.key_generator import CacheKeyGenerator
from newsbot.services.cache.result_cache import CacheCategory, CacheConfig, ResultCache


class TestCacheConfig:
    """Tests for TTL policy."""

    def test_ttl_per_category(self, cache_config):
        assert cache_config.ttl_for(CacheCategory.SESSION) == 120
        assert cache_config.ttl_for(CacheCategory.VECTOR) == 90
        assert cache_config.ttl_for("query") == 60
        assert cache_config.ttl_for(CacheCategory.DEFAULT) == 30

    def test_unknown_category_uses_default(self, cache_config):
        assert cache_config.ttl_for("embeddings") == 30

    def test_defaults(self):
        config = CacheConfig()
        assert config.session_ttl == 86400
        assert config.vector_ttl == 21600
        assert config.query_ttl == 3600


class TestPutAndGet:
    """Tests for generic put/get."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "category,configured_ttl",
        [
            (CacheCategory.QUERY, 60),
            (CacheCategory.VECTOR, 90),
            (CacheCategory.SESSION, 120),
            (CacheCategory.DEFAULT, 30),
        ],
    )
    async def test_round_trip_and_ttl(self, result_cache, clock, category, configured_ttl):
        """Values come back unchanged and expire within the category TTL."""
        value = {"answer": "42", "sources": [{"title": "t", "link": "l"}]}
        key = f"{category.value}:round-trip"

        assert await result_cache.put(key, value, category) is True
        assert await result_cache.get(key) == value

        clock.advance(1)
        ttl = await result_cache.get_ttl(key)
        assert 0 < ttl <= configured_ttl

    @pytest.mark.asyncio
    async def test_plain_string_values(self, result_cache):
        await result_cache.put("other:greeting", "hello")
        assert await result_cache.get("other:greeting") == "hello"

    @pytest.mark.asyncio
    async def test_entry_expires(self, result_cache, clock):
        await result_cache.put("query:x", {"a": 1}, CacheCategory.QUERY)
        clock.advance(60)
        assert await result_cache.get("query:x") is None

    @pytest.mark.asyncio
    async def test_hit_and_miss_counters(self, result_cache):
        await result_cache.put("query:x", {"a": 1}, CacheCategory.QUERY)

        await result_cache.get("query:x")
        await result_cache.get("query:missing")

        assert result_cache.counters.hits == 1
        assert result_cache.counters.misses == 1
        assert result_cache.counters.hit_rate == 0.5


class TestKeyOperations:
    """Tests for delete/exists/TTL operations."""

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, result_cache):
        await result_cache.put("query:x", {"a": 1}, CacheCategory.QUERY)

        assert await result_cache.delete("query:x") is True
        assert await result_cache.delete("query:x") is True
        assert await result_cache.exists("query:x") is False

    @pytest.mark.asyncio
    async def test_get_ttl_missing_key(self, result_cache):
        assert await result_cache.get_ttl("query:missing") == TTL_MISSING

    @pytest.mark.asyncio
    async def test_set_ttl(self, result_cache):
        await result_cache.put("query:x", {"a": 1}, CacheCategory.QUERY)

        assert await result_cache.set_ttl("query:x", 500) is True
        assert await result_cache.get_ttl("query:x") == 500
        assert await result_cache.set_ttl("query:missing", 500) is False


class TestClearAndStats:
    """Tests for pattern clearing and statistics."""

    @pytest.mark.asyncio
    async def test_clear_everything_then_stats_reports_zero(self, result_cache):
        await result_cache.put("query:a", {"a": 1}, CacheCategory.QUERY)
        await result_cache.put("session:b", {"b": 2}, CacheCategory.SESSION)
        await result_cache.put("vector:c", {"c": 3}, CacheCategory.VECTOR)

        assert await result_cache.clear_by_pattern("*") == 3

        stats = await result_cache.stats()
        assert stats is not None
        assert stats.total_keys == 0

    @pytest.mark.asyncio
    async def test_clear_by_prefix(self, result_cache):
        await result_cache.put("query:a", {"a": 1}, CacheCategory.QUERY)
        await result_cache.put("query:b", {"b": 1}, CacheCategory.QUERY)
        await result_cache.put("session:c", {"c": 1}, CacheCategory.SESSION)

        assert await result_cache.clear_by_pattern("query:*") == 2
        assert await result_cache.exists("session:c") is True

    @pytest.mark.asyncio
    async def test_clear_no_match(self, result_cache):
        assert await result_cache.clear_by_pattern("nothing:*") == 0

    @pytest.mark.asyncio
    async def test_stats_by_category_and_ttl(self, result_cache, connected_memory_backend):
        await result_cache.put("session:1", {"id": "1"}, CacheCategory.SESSION)
        await result_cache.put("query:a", {"a": 1}, CacheCategory.QUERY)
        await result_cache.put("query:b", {"b": 1}, CacheCategory.QUERY)
        await result_cache.put("vector:v", [0.1, 0.2], CacheCategory.VECTOR)
        await connected_memory_backend.set("legacy", "persistent value")

        stats = await result_cache.stats()

        assert stats.total_keys == 5
        assert stats.categories.sessions == 1
        assert stats.categories.queries == 2
        assert stats.categories.vectors == 1
        assert stats.categories.other == 1
        assert stats.keys_by_ttl.expiring == 4
        assert stats.keys_by_ttl.persistent == 1
        assert stats.memory_usage > 0

    @pytest.mark.asyncio
    async def test_stats_serializes_with_camel_case(self, result_cache):
        stats = await result_cache.stats()
        payload = stats.model_dump(by_alias=True)

        assert "totalKeys" in payload
        assert "keysByTtl" in payload
        assert "memoryUsage" in payload


class TestQueryAnswers:
    """Tests for the answer-level helpers."""

    @pytest.mark.asyncio
    async def test_cache_and_get_answer(self, result_cache):
        sources = [Source(title="Markets", link="https://news.example.com/markets")]
        await result_cache.cache_answer("Latest News", "Markets rallied.", sources)

        cached = await result_cache.get_cached_answer("  latest   news")

        assert cached is not None
        assert cached.answer == "Markets rallied."
        assert cached.sources == sources
        assert cached.warmed is False

    @pytest.mark.asyncio
    async def test_answers_use_query_ttl(self, result_cache):
        await result_cache.cache_answer("latest news", "answer", [])
        ttl = await result_cache.get_ttl(CacheKeyGenerator.query("latest news"))
        assert 0 < ttl <= 60

    @pytest.mark.asyncio
    async def test_warmed_flag_is_kept(self, result_cache):
        await result_cache.cache_answer("breaking news", "answer", [], warmed=True)
        cached = await result_cache.get_cached_answer("breaking news")
        assert cached.warmed is True

    @pytest.mark.asyncio
    async def test_is_query_cached(self, result_cache):
        assert await result_cache.is_query_cached("latest news") is False
        await result_cache.cache_answer("latest news", "answer", [])
        assert await result_cache.is_query_cached("LATEST NEWS") is True

    @pytest.mark.asyncio
    async def test_malformed_entry_is_a_miss(self, result_cache, connected_memory_backend):
        await connected_memory_backend.set(CacheKeyGenerator.query("latest news"), '{"unexpected": true}')
        assert await result_cache.get_cached_answer("latest news") is None


def failing_backend():
    """Backend whose every command reports the store as unavailable."""
    backend = MagicMock()
    backend.enabled = True
    error = StoreUnavailableError("Redis get failed: connection reset", operation="get")
    for name in ("get", "set", "delete", "exists", "ttl", "ttl_many", "expire", "keys", "memory_usage"):
        setattr(backend, name, AsyncMock(side_effect=error))
    return backend


class TestDegradedStore:
    """A failing store turns every cache operation into a safe default."""

    @pytest.mark.asyncio
    async def test_operations_return_safe_defaults(self):
        cache = ResultCache(failing_backend(), CacheConfig())

        assert await cache.put("query:x", {"a": 1}, CacheCategory.QUERY) is False
        assert await cache.get("query:x") is None
        assert await cache.delete("query:x") is False
        assert await cache.exists("query:x") is False
        assert await cache.get_ttl("query:x") == TTL_MISSING
        assert await cache.set_ttl("query:x", 10) is False
        assert await cache.clear_by_pattern("*") == 0
        assert await cache.stats() is None
        assert await cache.get_cached_answer("latest news") is None
        assert await cache.cache_answer("latest news", "answer", []) is False

    @pytest.mark.asyncio
    async def test_errors_are_counted(self):
        cache = ResultCache(failing_backend(), CacheConfig())

        await cache.get("query:x")
        await cache.put("query:x", {"a": 1})

        assert cache.counters.errors == 2
        assert cache.counters.misses == 0

    @pytest.mark.asyncio
    async def test_stats_without_memory_info(self, connected_memory_backend):
        connected_memory_backend.memory_usage = AsyncMock(
            side_effect=StoreUnavailableError("INFO not permitted", operation="info")
        )
        cache = ResultCache(connected_memory_backend, CacheConfig())
        await cache.put("query:x", {"a": 1}, CacheCategory.QUERY)

        stats = await cache.stats()

        assert stats.total_keys == 1
        assert stats.memory_usage == 0
