"""
Alias resolution for artists, venues and cities.

Resolution tiers, each consulted only when the previous one did not clear
`min_confidence`:

1. Custom aliases, exact on the normalized key (entry's own confidence)
2. Built-in aliases, exact on the raw input (100) then on the normalized input (95)
3. Fuzzy scan over built-in and custom aliases in scope (capped at 95)

Fuzzy results never reach 100 so callers can tell them apart from exact hits.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Iterable, Optional

from ...config import MatchConfig
from ...models import (
    AliasCounts,
    AliasResolution,
    AliasStats,
    BatchResolution,
    Category,
    CustomAlias,
    ResolutionSummary,
)
from ..matching.normalizer import normalize_for_matching
from ..matching.similarity import similarity
from .data import (
    ALL_ALIASES,
    ARTIST_ALIASES,
    CITY_ALIASES,
    VENUE_ALIASES,
    builtin_aliases_for,
    lookup_builtin,
    lookup_builtin_normalized,
    normalized_aliases,
)

logger = logging.getLogger(__name__)

DEFAULT_CUSTOM_CONFIDENCE = 95
NORMALIZED_CONFIDENCE = 95
FUZZY_CONFIDENCE_CAP = 95
SUGGESTION_FLOOR = 30
MAX_SUGGESTIONS = 3


class AliasResolver:
    """
    Maps abbreviations and nicknames to canonical names.

    Usage:
        resolver = AliasResolver()
        resolver.add("the mothership", "Madison Square Garden", "venue")
        result = resolver.resolve("MSG", "venue")
        if result.resolved:
            print(result.canonical, result.resolution_type)
    """

    def __init__(self, config: Optional[MatchConfig] = None) -> None:
        self.config = config or MatchConfig()
        self._custom: dict[str, CustomAlias] = {}
        self._lock = Lock()

    def add(
        self,
        alias: str,
        canonical: str,
        category: Category,
        confidence: int = DEFAULT_CUSTOM_CONFIDENCE,
    ) -> CustomAlias:
        key = normalize_for_matching(alias)
        entry = CustomAlias(alias=key, canonical=canonical, category=category, confidence=confidence)
        if not key:
            logger.debug("Ignoring custom alias %r: normalizes to nothing", alias)
            return entry
        with self._lock:
            self._custom[key] = entry
        logger.debug("Registered custom %s alias %r -> %r (%d)", category, key, canonical, confidence)
        return entry

    def remove(self, alias: str) -> bool:
        key = normalize_for_matching(alias)
        with self._lock:
            return self._custom.pop(key, None) is not None

    def custom_aliases(self) -> list[CustomAlias]:
        with self._lock:
            return list(self._custom.values())

    def resolve(self, input: str, category: Optional[Category] = None) -> AliasResolution:
        text = input or ""
        normalized = normalize_for_matching(text)

        for tier in (self._resolve_custom, self._resolve_builtin, self._resolve_fuzzy):
            result = tier(text, normalized, category)
            if result is not None and result.confidence >= self.config.min_confidence:
                return result

        return AliasResolution(
            input=text,
            canonical=None,
            confidence=0,
            resolution_type="none",
            suggestions=tuple(self._suggestions(normalized, category)),
        )

    def resolve_artist(self, input: str) -> AliasResolution:
        return self.resolve(input, "artist")

    def resolve_venue(self, input: str) -> AliasResolution:
        return self.resolve(input, "venue")

    def resolve_city(self, input: str) -> AliasResolution:
        return self.resolve(input, "city")

    def resolve_batch(self, inputs: Iterable[str], category: Optional[Category] = None) -> BatchResolution:
        results = [self.resolve(value, category) for value in inputs]
        total = len(results)
        resolved = sum(1 for result in results if result.resolved)
        confidence_sum = sum(result.confidence for result in results)
        summary = ResolutionSummary(
            total_inputs=total,
            resolved=resolved,
            unresolved=total - resolved,
            average_confidence=confidence_sum / total if total else 0.0,
        )
        return BatchResolution(results=results, summary=summary)

    def list_for(self, canonical: str, category: Optional[Category] = None) -> list[str]:
        """All aliases (built-in first, then custom) that resolve to `canonical`."""
        if not canonical:
            return []
        target = canonical.lower()
        merged = builtin_aliases_for(canonical, category)
        merged.extend(
            entry.alias
            for entry in self._scoped_custom(category)
            if entry.canonical.lower() == target
        )
        return list(dict.fromkeys(merged))

    def has_aliases(self, term: str, category: Optional[Category] = None) -> bool:
        return self.resolve(term, category).resolved

    def stats(self) -> AliasStats:
        counts = {"artist": 0, "venue": 0, "city": 0}
        custom = self.custom_aliases()
        for entry in custom:
            counts[entry.category] += 1
        return AliasStats(
            built_in=AliasCounts(
                artists=len(ARTIST_ALIASES),
                venues=len(VENUE_ALIASES),
                cities=len(CITY_ALIASES),
                total=len(ALL_ALIASES),
            ),
            custom=AliasCounts(
                artists=counts["artist"],
                venues=counts["venue"],
                cities=counts["city"],
                total=len(custom),
            ),
        )

    def _scoped_custom(self, category: Optional[Category]) -> list[CustomAlias]:
        return [entry for entry in self.custom_aliases() if category is None or entry.category == category]

    def _resolve_custom(
        self, text: str, normalized: str, category: Optional[Category]
    ) -> Optional[AliasResolution]:
        if not normalized:
            return None
        with self._lock:
            entry = self._custom.get(normalized)
        if entry is None or (category is not None and entry.category != category):
            return None
        return AliasResolution(
            input=text,
            canonical=entry.canonical,
            confidence=entry.confidence,
            resolution_type="exact",
        )

    def _resolve_builtin(
        self, text: str, normalized: str, category: Optional[Category]
    ) -> Optional[AliasResolution]:
        direct = lookup_builtin(text, category)
        if direct:
            return AliasResolution(input=text, canonical=direct, confidence=100, resolution_type="exact")
        folded = lookup_builtin_normalized(normalized, category)
        if folded:
            return AliasResolution(
                input=text,
                canonical=folded,
                confidence=NORMALIZED_CONFIDENCE,
                resolution_type="normalized",
            )
        return None

    def _candidates(self, category: Optional[Category]) -> list[tuple[str, str]]:
        pairs = list(normalized_aliases(category).items())
        pairs.extend((entry.alias, entry.canonical) for entry in self._scoped_custom(category))
        return pairs

    def _resolve_fuzzy(
        self, text: str, normalized: str, category: Optional[Category]
    ) -> Optional[AliasResolution]:
        if not normalized:
            return None
        best_canonical: Optional[str] = None
        best_score = -1
        for alias, canonical in self._candidates(category):
            score = similarity(normalized, alias)
            if score >= self.config.min_similarity and score > best_score:
                best_canonical = canonical
                best_score = score
        if best_canonical is None:
            return None
        return AliasResolution(
            input=text,
            canonical=best_canonical,
            confidence=min(best_score, FUZZY_CONFIDENCE_CAP),
            resolution_type="fuzzy",
        )

    def _suggestions(self, normalized: str, category: Optional[Category]) -> list[str]:
        if not normalized:
            return []
        scored: list[tuple[str, int]] = []
        for alias, canonical in self._candidates(category):
            score = similarity(normalized, alias)
            if SUGGESTION_FLOOR <= score < self.config.min_similarity:
                scored.append((canonical, score))
        scored.sort(key=lambda item: item[1], reverse=True)
        suggestions: list[str] = []
        for canonical, _score in scored:
            if canonical not in suggestions:
                suggestions.append(canonical)
            if len(suggestions) >= MAX_SUGGESTIONS:
                break
        return suggestions


default_resolver = AliasResolver()


def resolve_artist_alias(input: str) -> AliasResolution:
    return default_resolver.resolve_artist(input)


def resolve_venue_alias(input: str) -> AliasResolution:
    return default_resolver.resolve_venue(input)


def resolve_city_alias(input: str) -> AliasResolution:
    return default_resolver.resolve_city(input)


def resolve_any_alias(input: str) -> AliasResolution:
    return default_resolver.resolve(input)


def resolve_aliases(inputs: Iterable[str], category: Optional[Category] = None) -> BatchResolution:
    return default_resolver.resolve_batch(inputs, category)
