"""
Domain models for entity matching and alias resolution.

These are pure data models with no dependencies. Match results are frozen so
that a cached result list can be shared between callers as a snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional

Category = Literal["artist", "venue", "city"]
ResolutionType = Literal["exact", "normalized", "fuzzy", "none"]
EntityType = Literal["artist", "venue"]

CATEGORIES: tuple[Category, ...] = ("artist", "venue", "city")


def _aliases_from(raw: Mapping[str, Any]) -> tuple[str, ...]:
    values = raw.get("aliases") or ()
    return tuple(str(value) for value in values if value)


@dataclass(frozen=True)
class MatchableEntity:
    """
    A known entity supplied by the caller for a single matching call.

    Example:
        MatchableEntity(id="a1", name="The Beatles", aliases=("Beatles", "Fab Four"))
    """
    id: str
    """Caller-assigned unique identifier"""

    name: str
    """Display name as stored by the caller"""

    aliases: tuple[str, ...] = ()
    """Alternative names, nicknames or abbreviations"""


@dataclass(frozen=True)
class MatchableArtist(MatchableEntity):
    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "MatchableArtist":
        return cls(id=str(raw["id"]), name=str(raw["name"]), aliases=_aliases_from(raw))


@dataclass(frozen=True, kw_only=True)
class MatchableVenue(MatchableEntity):
    city: str
    """City the venue is located in, used for scoped filtering"""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "MatchableVenue":
        return cls(
            id=str(raw["id"]),
            name=str(raw["name"]),
            aliases=_aliases_from(raw),
            city=str(raw["city"]),
        )


@dataclass(frozen=True)
class ConfidenceBreakdown:
    """
    Per-factor scores behind a single confidence value (all 0-100).

    `weighted` is derived from the highest priority non-zero factor
    (exact, then alias, then fuzzy) times its configured weight.
    """
    exact_match: int = 0
    fuzzy_match: int = 0
    alias_match: int = 0
    weighted: int = 0


@dataclass(frozen=True)
class ScoredEntity:
    entity: MatchableEntity
    breakdown: ConfidenceBreakdown

    @property
    def confidence(self) -> int:
        return self.breakdown.weighted


@dataclass(frozen=True)
class ArtistMatch:
    id: str
    name: str
    confidence: int
    breakdown: ConfidenceBreakdown


@dataclass(frozen=True)
class VenueMatch:
    id: str
    name: str
    city: str
    confidence: int
    breakdown: ConfidenceBreakdown


@dataclass(frozen=True)
class BatchMatch:
    artists: list[ArtistMatch] = field(default_factory=list)
    venues: list[VenueMatch] = field(default_factory=list)


@dataclass(frozen=True)
class CustomAlias:
    alias: str
    """Normalized alias key"""

    canonical: str
    category: Category
    confidence: int = 95


@dataclass(frozen=True)
class AliasResolution:
    """
    Outcome of resolving one alias.

    `resolution_type == "none"` is a normal outcome; callers fall back to
    the `suggestions` list.
    """
    input: str
    canonical: Optional[str]
    confidence: int
    resolution_type: ResolutionType
    suggestions: tuple[str, ...] = ()

    @property
    def resolved(self) -> bool:
        return self.canonical is not None


@dataclass(frozen=True)
class ResolutionSummary:
    total_inputs: int
    resolved: int
    unresolved: int
    average_confidence: float


@dataclass(frozen=True)
class BatchResolution:
    results: list[AliasResolution]
    summary: ResolutionSummary


@dataclass(frozen=True)
class AliasCounts:
    artists: int = 0
    venues: int = 0
    cities: int = 0
    total: int = 0


@dataclass(frozen=True)
class AliasStats:
    built_in: AliasCounts
    custom: AliasCounts
