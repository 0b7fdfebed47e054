from __future__ import annotations

from typing import Optional

from ..cache import CachedEntityMatcher
from ..models import Category


def run(matcher: CachedEntityMatcher, value: str, *, category: Optional[Category] = None) -> int:
    result = matcher.resolve_alias(value, category)
    if result.resolved:
        print(f"{result.input} -> {result.canonical} ({result.resolution_type}, {result.confidence})")
        return 0
    print(f"No alias found for {value!r}.")
    if result.suggestions:
        print("Did you mean: " + ", ".join(result.suggestions))
    return 1
