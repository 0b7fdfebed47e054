"""
Partitioned result cache for entity matching.

Artist results, venue results and alias lookups live in separate LRU caches
so that each can carry its own TTL and a burst of one kind of query cannot
evict the others. Keys embed a short hash of the `MatchConfig` that produced
the results; changing thresholds therefore never serves stale rankings.

Key examples:
    "The Beatles"             -> artist:beatles:<hash>
    "MSG" (city "New York")   -> venue:msg:new york:<hash>
    resolve "NYC" as a city   -> alias:resolve:city:nyc
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections import deque
from dataclasses import dataclass
from threading import Lock
from typing import TYPE_CHECKING, Any, Literal, Optional, Sequence

from ..config import MatchConfig, MatcherCacheConfig
from ..core.matching.normalizer import normalize_for_matching
from ..models import ArtistMatch, Category, EntityType, MatchableArtist, MatchableVenue, VenueMatch
from .lru import LRUCache

if TYPE_CHECKING:
    from ..matcher import EntityMatcher

logger = logging.getLogger(__name__)

PartitionKind = Literal["artist", "venue", "alias"]

ARTIST_SHARE = 0.5
VENUE_SHARE = 0.4
ALIAS_SHARE = 0.1
RESPONSE_WINDOW = 1000
FAST_RESPONSE_MS = 100.0


def config_hash(config: MatchConfig) -> str:
    payload = json.dumps(config.model_dump(), sort_keys=True)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:8]


@dataclass(frozen=True)
class PartitionMetrics:
    hits: int
    misses: int
    hit_rate: float
    average_response_ms: float


@dataclass(frozen=True)
class OverallPerformance:
    total_requests: int
    cache_hit_rate: float
    average_response_ms: float
    sub_100ms_rate: float
    """Share of recorded responses (percent) that finished under 100 ms."""
    samples: int = 0


@dataclass(frozen=True)
class MatcherCacheMetrics:
    artist: PartitionMetrics
    venue: PartitionMetrics
    alias: PartitionMetrics
    overall: OverallPerformance


@dataclass(frozen=True)
class PartitionUtilization:
    size: int
    max_size: int
    utilization: float


@dataclass(frozen=True)
class CacheUtilization:
    artist: PartitionUtilization
    venue: PartitionUtilization
    alias: PartitionUtilization
    overall: PartitionUtilization


class MatcherCache:
    def __init__(self, config: Optional[MatcherCacheConfig] = None) -> None:
        self.config = config or MatcherCacheConfig()
        self.artists: LRUCache[tuple[ArtistMatch, ...]] = LRUCache(
            self.config.partition(ARTIST_SHARE, self.config.artist_ttl)
        )
        self.venues: LRUCache[tuple[VenueMatch, ...]] = LRUCache(
            self.config.partition(VENUE_SHARE, self.config.venue_ttl)
        )
        self.aliases: LRUCache[Any] = LRUCache(self.config.partition(ALIAS_SHARE, self.config.alias_ttl))
        self._responses: deque[float] = deque(maxlen=RESPONSE_WINDOW)
        self._averages: dict[PartitionKind, float] = {"artist": 0.0, "venue": 0.0, "alias": 0.0}
        self._lock = Lock()

    def __enter__(self) -> "MatcherCache":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- keys ---------------------------------------------------------------

    @staticmethod
    def artist_key(query: str, config: MatchConfig) -> str:
        return f"artist:{normalize_for_matching(query)}:{config_hash(config)}"

    @staticmethod
    def venue_key(query: str, config: MatchConfig, city_filter: Optional[str] = None) -> str:
        city = (city_filter or "").strip().lower()
        return f"venue:{normalize_for_matching(query)}:{city}:{config_hash(config)}"

    @staticmethod
    def alias_key(kind: str, value: str, category: Optional[Category] = None) -> str:
        # "AC-DC" and "ac dc" resolve differently, so alias keys keep the raw spelling
        return f"alias:{kind}:{category or '*'}:{(value or '').strip().lower()}"

    # -- artist / venue results ----------------------------------------------

    def get_artist_matches(self, query: str, config: MatchConfig) -> Optional[list[ArtistMatch]]:
        key = self.artist_key(query, config)
        cached = self.artists.get(key)
        if cached is None:
            logger.debug("Artist cache miss: %s", key)
            return None
        logger.debug("Artist cache hit: %s", key)
        return list(cached)

    def set_artist_matches(self, query: str, config: MatchConfig, matches: Sequence[ArtistMatch]) -> None:
        self.artists.set(self.artist_key(query, config), tuple(matches))

    def get_venue_matches(
        self, query: str, config: MatchConfig, city_filter: Optional[str] = None
    ) -> Optional[list[VenueMatch]]:
        key = self.venue_key(query, config, city_filter)
        cached = self.venues.get(key)
        if cached is None:
            logger.debug("Venue cache miss: %s", key)
            return None
        logger.debug("Venue cache hit: %s", key)
        return list(cached)

    def set_venue_matches(
        self,
        query: str,
        config: MatchConfig,
        matches: Sequence[VenueMatch],
        city_filter: Optional[str] = None,
    ) -> None:
        self.venues.set(self.venue_key(query, config, city_filter), tuple(matches))

    # -- aliases -------------------------------------------------------------

    def get_alias(self, kind: str, value: str, category: Optional[Category] = None) -> Optional[Any]:
        return self.aliases.get(self.alias_key(kind, value, category))

    def set_alias(self, kind: str, value: str, result: Any, category: Optional[Category] = None) -> None:
        self.aliases.set(self.alias_key(kind, value, category), result)

    def invalidate_aliases(self) -> None:
        self.aliases.clear()

    # -- metrics -------------------------------------------------------------

    def record_response(self, kind: PartitionKind, elapsed_ms: float) -> None:
        with self._lock:
            self._responses.append(elapsed_ms)
            previous = self._averages[kind]
            self._averages[kind] = elapsed_ms if previous == 0 else previous * 0.9 + elapsed_ms * 0.1
        logger.debug("%s lookup completed in %.2fms", kind, elapsed_ms)

    def metrics(self) -> MatcherCacheMetrics:
        partitions = {"artist": self.artists, "venue": self.venues, "alias": self.aliases}
        with self._lock:
            samples = list(self._responses)
            averages = dict(self._averages)

        per_partition: dict[str, PartitionMetrics] = {}
        total_requests = 0
        total_hits = 0
        for kind, cache in partitions.items():
            snapshot = cache.metrics()
            total_requests += snapshot.hits + snapshot.misses
            total_hits += snapshot.hits
            per_partition[kind] = PartitionMetrics(
                hits=snapshot.hits,
                misses=snapshot.misses,
                hit_rate=snapshot.hit_rate,
                average_response_ms=averages[kind],
            )

        fast = sum(1 for value in samples if value < FAST_RESPONSE_MS)
        overall = OverallPerformance(
            total_requests=total_requests,
            cache_hit_rate=(total_hits / total_requests) * 100.0 if total_requests else 0.0,
            average_response_ms=sum(samples) / len(samples) if samples else 0.0,
            sub_100ms_rate=(fast / len(samples)) * 100.0 if samples else 0.0,
            samples=len(samples),
        )
        return MatcherCacheMetrics(
            artist=per_partition["artist"],
            venue=per_partition["venue"],
            alias=per_partition["alias"],
            overall=overall,
        )

    def utilization(self) -> CacheUtilization:
        stats = [cache.stats() for cache in (self.artists, self.venues, self.aliases)]
        parts = [PartitionUtilization(s.size, s.max_size, s.utilization) for s in stats]
        total_size = sum(part.size for part in parts)
        total_max = sum(part.max_size for part in parts)
        return CacheUtilization(
            artist=parts[0],
            venue=parts[1],
            alias=parts[2],
            overall=PartitionUtilization(total_size, total_max, (total_size / total_max) * 100.0),
        )

    # -- maintenance ---------------------------------------------------------

    def warm(
        self,
        artists: Sequence[MatchableArtist],
        venues: Sequence[MatchableVenue],
        matcher: "EntityMatcher",
        queries: Optional[Sequence[str]] = None,
    ) -> int:
        """
        Precompute results for common queries.

        Results are computed with `matcher` and stored under its own config,
        so they are served to callers that match with the same thresholds.
        Returns the number of queries warmed.
        """
        if not self.config.enable_warming:
            logger.debug("Cache warming disabled")
            return 0

        config = matcher.config
        warmed = 0
        for query in queries if queries is not None else self.config.warming_queries:
            if not query or not query.strip():
                continue
            try:
                if artists:
                    self.set_artist_matches(query, config, matcher.match_artists(query, artists))
                if venues:
                    self.set_venue_matches(query, config, matcher.match_venues(query, venues))
            except Exception as exc:
                logger.warning("Failed to warm cache for %r: %s", query, exc)
                continue
            warmed += 1
        logger.info("Cache warmed with %d queries", warmed)
        return warmed

    def invalidate_entity(self, entity_type: EntityType, entity_id: str) -> int:
        if not entity_id:
            return 0

        def references(key: str, matches: Sequence[Any]) -> bool:
            return entity_id in key or any(match.id == entity_id for match in matches)

        cache = self.artists if entity_type == "artist" else self.venues
        removed = cache.delete_where(references)
        logger.debug("Invalidated %d cached %s results for %s", removed, entity_type, entity_id)
        return removed

    def clear(self) -> None:
        for cache in (self.artists, self.venues, self.aliases):
            cache.clear()
        with self._lock:
            self._responses.clear()
            self._averages = {"artist": 0.0, "venue": 0.0, "alias": 0.0}

    def close(self) -> None:
        for cache in (self.artists, self.venues, self.aliases):
            cache.close()
