"""Categorized TTL caching for the chat service.

Categories and their default TTLs:
- query: answered questions (1 hour)
- vector: retrieval artefacts (6 hours)
- session: session documents (24 hours)

Usage:
    from newsbot.services.cache import ResultCache, CacheConfig

    cache = ResultCache(backend, CacheConfig.from_settings(settings))

    await cache.cache_answer("latest news", answer, sources)
    cached = await cache.get_cached_answer("Latest  News")
"""

from newsbot.services.cache.key_generator import CacheKeyGenerator
from newsbot.services.cache.result_cache import CacheCategory, CacheConfig, ResultCache
from newsbot.services.cache.warmer import CacheWarmer

__all__ = [
    "CacheKeyGenerator",
    "CacheCategory",
    "CacheConfig",
    "ResultCache",
    "CacheWarmer",
]
