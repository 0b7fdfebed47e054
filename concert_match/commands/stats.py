from __future__ import annotations

from ..cache import CachedEntityMatcher
from ..models import AliasCounts


def _counts_line(label: str, counts: AliasCounts) -> str:
    return (
        f"{label}: {counts.total} "
        f"(artists {counts.artists}, venues {counts.venues}, cities {counts.cities})"
    )


def run(matcher: CachedEntityMatcher) -> int:
    stats = matcher.resolver.stats()
    print(_counts_line("Built-in aliases", stats.built_in))
    print(_counts_line("Custom aliases", stats.custom))

    config = matcher.config
    print(
        f"Matching: min_similarity={config.min_similarity} "
        f"min_confidence={config.min_confidence} max_results={config.max_results}"
    )
    usage = matcher.cache_utilization()
    for name, part in (("artist", usage.artist), ("venue", usage.venue), ("alias", usage.alias)):
        print(f"Cache {name}: {part.size}/{part.max_size} ({part.utilization:.1f}%)")
    return 0
