"""
Confidence scoring for candidate entities.

A candidate gets three sub-scores against the query:

- exact: 100 when the normalized query equals the normalized name
- fuzzy: edit-distance similarity between query and name
- alias: best similarity between query and any alias (100 on an exact alias)

The weighted confidence is NOT a blend of the three. The first non-zero
sub-score in priority order exact → alias → fuzzy is multiplied by its
configured weight. Swapping that order changes rankings.

Invariant:
Given identical inputs, `score_entities` returns the same list in the same
order; ties keep the caller's candidate order.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, TypeVar

from ...config import MatchConfig
from ...models import ConfidenceBreakdown, MatchableEntity, ScoredEntity
from .similarity import is_exact_match, round_half_up, similarity

E = TypeVar("E", bound=MatchableEntity)

CONFIDENCE_LEVELS = (
    (95, "Excellent"),
    (85, "High"),
    (75, "Good"),
    (65, "Fair"),
    (50, "Low"),
)


def _alias_score(query: str, aliases: Iterable[str]) -> int:
    best = 0
    for alias in aliases:
        if not alias:
            continue
        if is_exact_match(query, alias):
            return 100
        best = max(best, similarity(query, alias))
    return best


def weighted_score(breakdown: ConfidenceBreakdown, config: MatchConfig) -> int:
    if breakdown.exact_match > 0:
        raw = breakdown.exact_match * config.exact_match_weight
    elif breakdown.alias_match > 0:
        raw = breakdown.alias_match * config.alias_match_weight
    else:
        raw = breakdown.fuzzy_match * config.fuzzy_match_weight
    return min(100, max(0, round_half_up(raw)))


def score(
    query: Optional[str],
    target_name: Optional[str],
    aliases: Optional[Sequence[str]],
    config: MatchConfig,
) -> ConfidenceBreakdown:
    if not query or not query.strip() or not target_name or not target_name.strip():
        return ConfidenceBreakdown()

    exact = 100 if is_exact_match(query, target_name) else 0
    fuzzy = similarity(query, target_name)
    alias = _alias_score(query, aliases or ())
    partial = ConfidenceBreakdown(exact_match=exact, fuzzy_match=fuzzy, alias_match=alias)
    return ConfidenceBreakdown(
        exact_match=exact,
        fuzzy_match=fuzzy,
        alias_match=alias,
        weighted=weighted_score(partial, config),
    )


def meets_threshold(breakdown: ConfidenceBreakdown, config: MatchConfig) -> bool:
    return breakdown.weighted >= config.min_confidence


def score_entities(
    query: Optional[str], entities: Sequence[E], config: MatchConfig
) -> list[ScoredEntity]:
    if not query or not query.strip() or not entities:
        return []

    scored = []
    for entity in entities:
        breakdown = score(query, entity.name, entity.aliases, config)
        if meets_threshold(breakdown, config):
            scored.append(ScoredEntity(entity=entity, breakdown=breakdown))

    # sort() is stable, so equal confidences keep the candidate order
    scored.sort(key=lambda item: item.breakdown.weighted, reverse=True)
    return scored[: config.max_results]


def confidence_level(confidence: float) -> str:
    for threshold, label in CONFIDENCE_LEVELS:
        if confidence >= threshold:
            return label
    return "Poor"


def better_breakdown(a: ConfidenceBreakdown, b: ConfidenceBreakdown) -> ConfidenceBreakdown:
    """Return the stronger of two breakdowns; `a` wins full ties."""
    for attr in ("weighted", "exact_match", "alias_match", "fuzzy_match"):
        left = getattr(a, attr)
        right = getattr(b, attr)
        if right > left:
            return b
        if left > right:
            return a
    return a
