"""Cache management endpoints."""

from fastapi import APIRouter, Depends

from newsbot.api.deps import get_result_cache, get_warmer
from newsbot.models.cache import CacheClearResponse, CacheStatsResponse, CacheWarmResponse
from newsbot.services.cache.result_cache import ResultCache
from newsbot.services.cache.warmer import CacheWarmer

router = APIRouter(prefix="/cache")


@router.get("/stats", response_model=CacheStatsResponse)
async def get_cache_stats(
    cache: ResultCache = Depends(get_result_cache),
) -> CacheStatsResponse:
    """Key counts by category and TTL; ``success`` is false when the store is down."""
    stats = await cache.stats()
    return CacheStatsResponse(success=stats is not None, stats=stats)


@router.post("/warm", response_model=CacheWarmResponse)
async def warm_cache(
    warmer: CacheWarmer = Depends(get_warmer),
) -> CacheWarmResponse:
    """Run one warming pass now, whether or not periodic warming is enabled."""
    report = await warmer.warm()
    return CacheWarmResponse(report=report)


@router.delete("/clear", response_model=CacheClearResponse)
async def clear_cache(
    cache: ResultCache = Depends(get_result_cache),
) -> CacheClearResponse:
    return await clear_cache_pattern("*", cache)


@router.delete("/clear/{pattern}", response_model=CacheClearResponse)
async def clear_cache_pattern(
    pattern: str,
    cache: ResultCache = Depends(get_result_cache),
) -> CacheClearResponse:
    """Delete every key matching a glob pattern."""
    cleared = await cache.clear_by_pattern(pattern)
    return CacheClearResponse(pattern=pattern, cleared_keys=cleared)
