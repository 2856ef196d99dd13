"""Cache entry and cache statistics models."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from newsbot.models.query import Source
from newsbot.models.session import utc_now


class CachedAnswer(BaseModel):
    """Value stored under a ``query:`` key."""
    query: str
    answer: str
    sources: List[Source] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utc_now)
    warmed: bool = Field(False, description="Produced by the background warmer")


class CategoryCounts(BaseModel):
    sessions: int = 0
    queries: int = 0
    vectors: int = 0
    other: int = 0


class TTLCounts(BaseModel):
    expiring: int = 0
    persistent: int = 0


class CacheStatsSnapshot(BaseModel):
    """Point-in-time view of the key-value store, computed on demand."""
    total_keys: int = 0
    categories: CategoryCounts = Field(default_factory=CategoryCounts)
    keys_by_ttl: TTLCounts = Field(default_factory=TTLCounts)
    memory_usage: int = Field(0, description="Bytes reported by the store")
    hits: int = 0
    misses: int = 0
    errors: int = 0
    hit_rate: float = 0.0

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CacheStatsResponse(BaseModel):
    success: bool = True
    stats: Optional[CacheStatsSnapshot] = None


class WarmingReport(BaseModel):
    """Outcome of one warming pass."""
    warmed: int = 0
    already_cached: int = 0
    empty: int = 0
    failed: int = 0

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CacheWarmResponse(BaseModel):
    success: bool = True
    report: WarmingReport


class CacheClearResponse(BaseModel):
    success: bool = True
    pattern: str
    cleared_keys: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
