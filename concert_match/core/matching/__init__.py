"""
Name matching primitives.

This package handles:
- Text normalization (case, accents, punctuation, transliteration, articles)
- Edit-distance similarity (0-100)
- Confidence scoring with an explainable breakdown

All logic is pure and has no I/O dependencies.
"""

from __future__ import annotations

from .normalizer import (
    generate_variations,
    normalize_for_display,
    normalize_for_matching,
    normalize_text,
)
from .scoring import (
    confidence_level,
    meets_threshold,
    score,
    score_entities,
    weighted_score,
)
from .similarity import edit_distance, is_exact_match, similarity

__all__ = [
    "confidence_level",
    "edit_distance",
    "generate_variations",
    "is_exact_match",
    "meets_threshold",
    "normalize_for_display",
    "normalize_for_matching",
    "normalize_text",
    "score",
    "score_entities",
    "similarity",
    "weighted_score",
]
