from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Sequence

from ..config import MatchConfig, MatcherCacheConfig, UseCase
from ..core.aliases.resolver import DEFAULT_CUSTOM_CONFIDENCE, AliasResolver
from ..matcher import EntityMatcher, elapsed_ms, warn_if_slow
from ..models import (
    AliasResolution,
    ArtistMatch,
    BatchMatch,
    Category,
    CustomAlias,
    EntityType,
    MatchableArtist,
    MatchableVenue,
    VenueMatch,
)
from .matcher_cache import CacheUtilization, MatcherCache, MatcherCacheMetrics, PartitionKind

logger = logging.getLogger(__name__)

TARGET_SUB_100MS_RATE = 95.0
TARGET_HIT_RATE = 80.0
TARGET_AVERAGE_MS = 50.0

AUTOCOMPLETE_WARMING_QUERIES = [chr(code) for code in range(ord("a"), ord("z") + 1)] + [
    "the",
    "an",
    "and",
    "of",
    "to",
    "in",
    "for",
    "with",
]


@dataclass(frozen=True)
class PerformanceReport:
    meets_requirement: bool
    cache_hit_rate: float
    average_response_ms: float
    sub_100ms_rate: float
    recommendations: list[str] = field(default_factory=list)


def use_case_configs(use_case: UseCase) -> tuple[MatchConfig, MatcherCacheConfig]:
    """Matcher and cache settings tuned for one workload."""
    if use_case == "autocomplete":
        return MatchConfig.autocomplete(), MatcherCacheConfig(
            max_size=10000,
            artist_ttl=900,
            venue_ttl=600,
            alias_ttl=1800,
            enable_warming=True,
            warming_queries=list(AUTOCOMPLETE_WARMING_QUERIES),
        )
    if use_case == "search":
        # Search queries are too varied for warming to pay off
        return MatchConfig.precision(), MatcherCacheConfig(
            max_size=5000,
            artist_ttl=600,
            venue_ttl=300,
            alias_ttl=900,
            enable_warming=False,
        )
    if use_case == "import":
        return (
            MatchConfig(
                min_similarity=80,
                min_confidence=85,
                max_results=3,
                exact_match_weight=1.0,
                fuzzy_match_weight=0.9,
                alias_match_weight=0.95,
            ),
            MatcherCacheConfig(
                max_size=2000,
                artist_ttl=3600,
                venue_ttl=3600,
                alias_ttl=3600,
                enable_warming=False,
            ),
        )
    raise ValueError(f"Unknown use case: {use_case!r}")


class CachedEntityMatcher:
    """
    `EntityMatcher` with a result cache in front of it.

    Cache entries are keyed by query, config and city filter only, not by the
    candidate list. When the set of known artists or venues changes, call
    `invalidate()` for the affected entity or `clear_cache()`.
    """

    def __init__(
        self,
        matcher: Optional[EntityMatcher] = None,
        cache: Optional[MatcherCache] = None,
        resolver: Optional[AliasResolver] = None,
    ) -> None:
        self.matcher = matcher or EntityMatcher()
        self.cache = cache or MatcherCache()
        self.resolver = resolver or AliasResolver()

    @classmethod
    def for_use_case(
        cls, use_case: UseCase, resolver: Optional[AliasResolver] = None
    ) -> "CachedEntityMatcher":
        match_config, cache_config = use_case_configs(use_case)
        return cls(EntityMatcher(match_config), MatcherCache(cache_config), resolver)

    def __enter__(self) -> "CachedEntityMatcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def config(self) -> MatchConfig:
        return self.matcher.config

    def update_config(self, **changes: Any) -> MatchConfig:
        return self.matcher.update_config(**changes)

    def is_likely_match(self, query: Optional[str], name: Optional[str], aliases: Iterable[str] = ()) -> bool:
        return self.matcher.is_likely_match(query, name, aliases)

    # -- matching ------------------------------------------------------------

    def match_artists(self, query: Optional[str], artists: Sequence[MatchableArtist]) -> list[ArtistMatch]:
        started = time.perf_counter()
        if not query or not query.strip() or not artists:
            return []

        config = self.matcher.config
        matches = self.cache.get_artist_matches(query, config)
        if matches is None:
            matches = self.matcher.match_artists(query, artists)
            self.cache.set_artist_matches(query, config, matches)
        self._finish("artist", "Artist matching", started)
        return matches

    def match_venues(
        self,
        query: Optional[str],
        venues: Sequence[MatchableVenue],
        city_filter: Optional[str] = None,
    ) -> list[VenueMatch]:
        started = time.perf_counter()
        if not query or not query.strip() or not venues:
            return []

        config = self.matcher.config
        matches = self.cache.get_venue_matches(query, config, city_filter)
        if matches is None:
            matches = self.matcher.match_venues(query, venues, city_filter)
            self.cache.set_venue_matches(query, config, matches, city_filter)
        self._finish("venue", "Venue matching", started)
        return matches

    def find_best_artist(self, query: Optional[str], artists: Sequence[MatchableArtist]) -> Optional[ArtistMatch]:
        matches = self.match_artists(query, artists)
        return matches[0] if matches else None

    def find_best_venue(
        self,
        query: Optional[str],
        venues: Sequence[MatchableVenue],
        city_filter: Optional[str] = None,
    ) -> Optional[VenueMatch]:
        matches = self.match_venues(query, venues, city_filter)
        return matches[0] if matches else None

    def batch_match(
        self,
        queries: Iterable[str],
        artists: Sequence[MatchableArtist] = (),
        venues: Sequence[MatchableVenue] = (),
    ) -> dict[str, BatchMatch]:
        started = time.perf_counter()
        results: dict[str, BatchMatch] = {}
        for query in queries:
            if not query or not query.strip():
                continue
            try:
                results[query] = BatchMatch(
                    artists=self.match_artists(query, artists),
                    venues=self.match_venues(query, venues),
                )
            except Exception:
                logger.exception("Batch matching failed for query %r; skipping", query)
        duration = elapsed_ms(started)
        if results:
            per_query = duration / len(results)
            logger.debug("Batch matched %d queries in %.2fms (%.2fms/query)", len(results), duration, per_query)
            warn_if_slow("Average batch query", per_query)
        return results

    # -- aliases -------------------------------------------------------------

    def resolve_alias(self, input: str, category: Optional[Category] = None) -> AliasResolution:
        started = time.perf_counter()
        result = self.cache.get_alias("resolve", input or "", category)
        if result is None:
            result = self.resolver.resolve(input, category)
            self.cache.set_alias("resolve", input or "", result, category)
        self._finish("alias", "Alias resolution", started)
        return result

    def aliases_for(self, canonical: str, category: Optional[Category] = None) -> list[str]:
        started = time.perf_counter()
        cached = self.cache.get_alias("list", canonical or "", category)
        if cached is None:
            cached = tuple(self.resolver.list_for(canonical, category))
            self.cache.set_alias("list", canonical or "", cached, category)
        self._finish("alias", "Alias listing", started)
        return list(cached)

    def add_alias(
        self,
        alias: str,
        canonical: str,
        category: Category,
        confidence: int = DEFAULT_CUSTOM_CONFIDENCE,
    ) -> CustomAlias:
        entry = self.resolver.add(alias, canonical, category, confidence)
        self.cache.invalidate_aliases()
        return entry

    def remove_alias(self, alias: str) -> bool:
        removed = self.resolver.remove(alias)
        if removed:
            self.cache.invalidate_aliases()
        return removed

    # -- cache management ----------------------------------------------------

    def warm_cache(
        self,
        artists: Sequence[MatchableArtist],
        venues: Sequence[MatchableVenue],
        queries: Optional[Sequence[str]] = None,
    ) -> int:
        return self.cache.warm(artists, venues, self.matcher, queries)

    def invalidate(self, entity_type: EntityType, entity_id: str) -> int:
        return self.cache.invalidate_entity(entity_type, entity_id)

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_metrics(self) -> MatcherCacheMetrics:
        return self.cache.metrics()

    def cache_utilization(self) -> CacheUtilization:
        return self.cache.utilization()

    def analyze_performance(self) -> PerformanceReport:
        overall = self.cache.metrics().overall
        # Nothing recorded yet counts as meeting the target
        meets = overall.samples == 0 or overall.sub_100ms_rate >= TARGET_SUB_100MS_RATE
        recommendations: list[str] = []
        if not meets:
            recommendations.extend(
                [
                    "Consider increasing cache size",
                    "Review cache TTL settings",
                    "Implement more aggressive cache warming",
                ]
            )
        if overall.total_requests and overall.cache_hit_rate < TARGET_HIT_RATE:
            recommendations.append("Cache hit rate below 80% - review cache strategy")
        if overall.average_response_ms > TARGET_AVERAGE_MS:
            recommendations.append("Average response time above 50ms - optimize matching algorithms")
        return PerformanceReport(
            meets_requirement=meets,
            cache_hit_rate=overall.cache_hit_rate,
            average_response_ms=overall.average_response_ms,
            sub_100ms_rate=overall.sub_100ms_rate,
            recommendations=recommendations,
        )

    def close(self) -> None:
        self.cache.close()

    def _finish(self, kind: PartitionKind, operation: str, started: float) -> None:
        duration = elapsed_ms(started)
        self.cache.record_response(kind, duration)
        warn_if_slow(operation, duration)
