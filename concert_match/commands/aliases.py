from __future__ import annotations

from typing import Optional

from ..cache import CachedEntityMatcher
from ..models import Category


def run(matcher: CachedEntityMatcher, canonical: str, *, category: Optional[Category] = None) -> int:
    aliases = matcher.aliases_for(canonical, category)
    if not aliases:
        print(f"No aliases known for {canonical!r}.")
        return 1
    for alias in aliases:
        print(alias)
    return 0
