"""In-memory caches: a generic LRU+TTL store and the matcher-specific layer built on it."""

from __future__ import annotations

from .cached_matcher import CachedEntityMatcher, PerformanceReport, use_case_configs
from .lru import CacheMetrics, CacheStats, LRUCache
from .matcher_cache import CacheUtilization, MatcherCache, MatcherCacheMetrics, config_hash

__all__ = [
    "CacheMetrics",
    "CacheStats",
    "CacheUtilization",
    "CachedEntityMatcher",
    "LRUCache",
    "MatcherCache",
    "MatcherCacheMetrics",
    "PerformanceReport",
    "config_hash",
    "use_case_configs",
]
