from __future__ import annotations

import json
from dataclasses import asdict
from typing import Literal, Optional

from ..app import Candidates
from ..cache import CachedEntityMatcher
from ..core.matching.scoring import confidence_level

Target = Literal["artists", "venues"]


def run(
    matcher: CachedEntityMatcher,
    candidates: Candidates,
    *,
    target: Target,
    query: str,
    city: Optional[str] = None,
    json_output: bool = False,
) -> int:
    if target == "artists":
        matches = matcher.match_artists(query, candidates.artists)
    else:
        matches = matcher.match_venues(query, candidates.venues, city)
    if json_output:
        print(json.dumps([asdict(match) for match in matches], indent=2, sort_keys=True))
        return 0
    if not matches:
        print(f"No {target} matched {query!r}.")
        return 0
    for match in matches:
        where = f" ({match.city})" if getattr(match, "city", "") else ""
        print(f"{match.confidence:3d}  {match.name}{where}  [{match.id}] {confidence_level(match.confidence)}")
    return 0
