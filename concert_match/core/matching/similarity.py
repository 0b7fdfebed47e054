"""
Edit-distance based similarity scoring.

`similarity` returns an integer from 0 to 100. Both inputs go through the
matching normalization first, so "The Beatles" and "beatles" are identical.
Two inputs that both normalize to the empty string count as identical (100);
exactly one empty side scores 0.

All functions are pure and have no I/O dependencies.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

from rapidfuzz.distance import Levenshtein

from .normalizer import normalize_for_matching


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def edit_distance(a: str, b: str) -> int:
    """Unit-cost insert/delete/substitute distance."""
    return Levenshtein.distance(a or "", b or "")


def _ratio(a: str, b: str) -> int:
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 100
    distance = edit_distance(a, b)
    return max(0, round_half_up((max_len - distance) / max_len * 100))


def similarity(a: Optional[str], b: Optional[str]) -> int:
    norm_a = normalize_for_matching(a or "")
    norm_b = normalize_for_matching(b or "")
    if norm_a == norm_b:
        return 100
    if not norm_a or not norm_b:
        return 0
    return _ratio(norm_a, norm_b)


def is_exact_match(a: Optional[str], b: Optional[str]) -> bool:
    norm_a = normalize_for_matching(a or "")
    if not norm_a:
        return False
    return norm_a == normalize_for_matching(b or "")


def similarity_with_case(a: Optional[str], b: Optional[str], case_sensitive: bool = False) -> int:
    """Raw similarity that only trims (and optionally lowercases) the inputs."""
    if not a or not b:
        return 0
    left = a.strip()
    right = b.strip()
    if not case_sensitive:
        left = left.lower()
        right = right.lower()
    if left == right:
        return 100
    return _ratio(left, right)


def find_best_match(
    query: Optional[str], candidates: Iterable[str], min_similarity: int = 60
) -> Optional[tuple[str, int]]:
    if not query:
        return None
    best: Optional[tuple[str, int]] = None
    for candidate in candidates:
        score = similarity(query, candidate)
        if score >= min_similarity and (best is None or score > best[1]):
            best = (candidate, score)
    return best


def rank_candidates(
    query: Optional[str], candidates: Iterable[str], min_similarity: int = 0
) -> list[tuple[str, int]]:
    if not query:
        return []
    scored = [(candidate, similarity(query, candidate)) for candidate in candidates]
    ranked = [item for item in scored if item[1] >= min_similarity]
    ranked.sort(key=lambda item: item[1], reverse=True)
    return ranked
