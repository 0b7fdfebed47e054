from __future__ import annotations

import logging
import time
from typing import Any, Iterable, Optional, Sequence

from .config import MatchConfig
from .core.matching.scoring import score, score_entities
from .models import ArtistMatch, BatchMatch, MatchableArtist, MatchableVenue, VenueMatch

logger = logging.getLogger(__name__)

PERFORMANCE_BUDGET_MS = 100.0
# Pre-filter threshold relative to min_confidence; looser than the real cut-off
LIKELY_MATCH_FACTOR = 0.7


def elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0


def warn_if_slow(operation: str, duration_ms: float) -> None:
    if duration_ms > PERFORMANCE_BUDGET_MS:
        logger.warning(
            "%s took %.2fms (budget %.0fms)", operation, duration_ms, PERFORMANCE_BUDGET_MS
        )


def filter_by_city(venues: Sequence[MatchableVenue], city_filter: Optional[str]) -> Sequence[MatchableVenue]:
    if not city_filter or not city_filter.strip():
        return venues
    needle = city_filter.strip().lower()
    return [venue for venue in venues if needle in (venue.city or "").lower()]


class EntityMatcher:
    """
    Ranks known artists and venues against a free-text query.

    Candidates are supplied fresh on every call; the matcher keeps no state
    besides its configuration.
    """

    def __init__(self, config: Optional[MatchConfig] = None) -> None:
        self._config = config or MatchConfig()

    @classmethod
    def autocomplete(cls) -> "EntityMatcher":
        return cls(MatchConfig.autocomplete())

    @classmethod
    def precision(cls) -> "EntityMatcher":
        return cls(MatchConfig.precision())

    @property
    def config(self) -> MatchConfig:
        return self._config

    def update_config(self, **changes: Any) -> MatchConfig:
        self._config = self._config.with_overrides(**changes)
        return self._config

    def match_artists(self, query: Optional[str], artists: Sequence[MatchableArtist]) -> list[ArtistMatch]:
        started = time.perf_counter()
        if not query or not query.strip() or not artists:
            return []

        scored = score_entities(query.strip(), artists, self._config)
        matches = [
            ArtistMatch(
                id=item.entity.id,
                name=item.entity.name,
                confidence=item.breakdown.weighted,
                breakdown=item.breakdown,
            )
            for item in scored
        ]
        warn_if_slow("Artist matching", elapsed_ms(started))
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

        candidates = filter_by_city(venues, city_filter)
        scored = score_entities(query.strip(), candidates, self._config)
        matches = [
            VenueMatch(
                id=item.entity.id,
                name=item.entity.name,
                city=getattr(item.entity, "city", ""),
                confidence=item.breakdown.weighted,
                breakdown=item.breakdown,
            )
            for item in scored
        ]
        warn_if_slow("Venue matching", elapsed_ms(started))
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

    def is_likely_match(
        self, query: Optional[str], name: Optional[str], aliases: Iterable[str] = ()
    ) -> bool:
        """
        Cheap pre-filter for autocomplete.

        Substring checks come first; edit distance is only computed for
        queries of three characters or more.
        """
        if not query or not query.strip() or not name or not name.strip():
            return False

        needle = query.lower().strip()
        haystack = name.lower().strip()
        if needle in haystack or haystack in needle:
            return True

        alias_list = [alias for alias in aliases if alias and alias.strip()]
        for alias in alias_list:
            folded = alias.lower().strip()
            if needle in folded or folded in needle:
                return True

        if len(needle) <= 2:
            return haystack.startswith(needle)

        breakdown = score(query, name, alias_list, self._config)
        return breakdown.weighted >= self._config.min_confidence * LIKELY_MATCH_FACTOR

    def batch_match(
        self,
        queries: Iterable[str],
        artists: Sequence[MatchableArtist] = (),
        venues: Sequence[MatchableVenue] = (),
    ) -> dict[str, BatchMatch]:
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
        return results
