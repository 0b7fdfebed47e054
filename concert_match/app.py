from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .cache import CachedEntityMatcher, MatcherCache
from .config import Settings
from .core.aliases import AliasResolver
from .matcher import EntityMatcher
from .models import MatchableArtist, MatchableVenue

logger = logging.getLogger(__name__)


@dataclass
class Candidates:
    artists: list[MatchableArtist] = field(default_factory=list)
    venues: list[MatchableVenue] = field(default_factory=list)


def load_candidates(path: Path) -> Candidates:
    """Read a JSON file shaped like {"artists": [...], "venues": [...]}."""
    with path.open("r", encoding="utf-8") as fh:
        raw = json.load(fh)
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a JSON object with 'artists' and 'venues'")
    return Candidates(
        artists=[MatchableArtist.from_dict(item) for item in raw.get("artists") or []],
        venues=[MatchableVenue.from_dict(item) for item in raw.get("venues") or []],
    )


@dataclass
class ConcertMatchApp:
    settings: Settings
    resolver: AliasResolver
    cache: MatcherCache
    matcher: CachedEntityMatcher

    @classmethod
    def create(cls, settings: Settings) -> "ConcertMatchApp":
        resolver = AliasResolver(settings.matching)
        for entry in settings.custom_aliases:
            resolver.add(entry.alias, entry.canonical, entry.category, entry.confidence)
        if settings.use_case:
            matcher = CachedEntityMatcher.for_use_case(settings.use_case, resolver=resolver)
            cache = matcher.cache
        else:
            cache = MatcherCache(settings.cache)
            matcher = CachedEntityMatcher(EntityMatcher(settings.matching), cache, resolver)
        logger.debug(
            "Matcher ready (use case %s, %d custom aliases)",
            settings.use_case or "default",
            len(settings.custom_aliases),
        )
        return cls(settings=settings, resolver=resolver, cache=cache, matcher=matcher)

    def close(self) -> None:
        self.matcher.close()
