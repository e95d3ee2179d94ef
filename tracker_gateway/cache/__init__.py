"""In-process TTL caching for idempotent tracker reads."""

from tracker_gateway.cache.keys import EntityCacheKey, EntityType
from tracker_gateway.cache.manager import (
    DEFAULT_CACHE_TTL_SECONDS,
    CacheManager,
    InMemoryCacheManager,
    NoOpCache,
)


__all__ = [
    "DEFAULT_CACHE_TTL_SECONDS",
    "CacheManager",
    "EntityCacheKey",
    "EntityType",
    "InMemoryCacheManager",
    "NoOpCache",
]
