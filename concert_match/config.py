from __future__ import annotations

from pathlib import Path
from typing import Any, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import Category

UseCase = Literal["autocomplete", "search", "import"]


class MatchConfig(BaseModel):
    """Thresholds and weights for scoring candidates.

    Weights are applied to the single best sub-score, so each one has to stay
    within [0, 1] for the weighted result to stay within [0, 100].
    """

    model_config = ConfigDict(frozen=True)

    min_similarity: int = Field(default=60, ge=0, le=100)
    min_confidence: int = Field(default=70, ge=0, le=100)
    max_results: int = Field(default=10, ge=1)
    exact_match_weight: float = Field(default=1.0, ge=0.0, le=1.0)
    fuzzy_match_weight: float = Field(default=0.8, ge=0.0, le=1.0)
    alias_match_weight: float = Field(default=0.9, ge=0.0, le=1.0)

    @classmethod
    def autocomplete(cls) -> "MatchConfig":
        # Low latency, high recall; alias hits count for more than fuzzy ones.
        return cls(
            min_similarity=50,
            min_confidence=60,
            max_results=5,
            exact_match_weight=1.0,
            fuzzy_match_weight=0.7,
            alias_match_weight=0.95,
        )

    @classmethod
    def precision(cls) -> "MatchConfig":
        return cls(
            min_similarity=70,
            min_confidence=80,
            max_results=20,
            exact_match_weight=1.0,
            fuzzy_match_weight=0.85,
            alias_match_weight=0.9,
        )

    def with_overrides(self, **changes: Any) -> "MatchConfig":
        payload = self.model_dump()
        payload.update(changes)
        return MatchConfig.model_validate(payload)


class NormalizationConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    convert_unicode: bool = True
    remove_accents: bool = True
    lowercase: bool = True
    remove_punctuation: bool = True
    normalize_whitespace: bool = True
    remove_articles: bool = True
    remove_stop_words: bool = False


class LRUCacheConfig(BaseModel):
    """Sizing for a single LRU cache. Durations are in seconds; a TTL of 0 never expires."""

    max_size: int = Field(default=1000, ge=1)
    default_ttl: float = Field(default=300.0, ge=0)
    cleanup_interval: float = Field(default=60.0, ge=0)
    enable_metrics: bool = True


DEFAULT_WARMING_QUERIES = [
    "the",
    "a",
    "and",
    "of",
    "taylor swift",
    "the beatles",
    "rolling stones",
    "pink floyd",
    "madison square garden",
    "hollywood bowl",
    "red rocks",
]


class MatcherCacheConfig(BaseModel):
    max_size: int = Field(default=5000, ge=1)
    default_ttl: float = Field(default=300.0, ge=0)
    cleanup_interval: float = Field(default=120.0, ge=0)
    enable_metrics: bool = True
    artist_ttl: float = Field(default=600.0, ge=0)
    venue_ttl: float = Field(default=300.0, ge=0)
    alias_ttl: float = Field(default=900.0, ge=0)
    enable_warming: bool = True
    warming_queries: List[str] = Field(default_factory=lambda: list(DEFAULT_WARMING_QUERIES))

    def partition(self, share: float, ttl: float) -> LRUCacheConfig:
        return LRUCacheConfig(
            max_size=max(1, int(self.max_size * share)),
            default_ttl=ttl,
            cleanup_interval=self.cleanup_interval,
            enable_metrics=self.enable_metrics,
        )


class CustomAliasSettings(BaseModel):
    alias: str
    canonical: str
    category: Category
    confidence: int = Field(default=95, ge=0, le=100)

    @field_validator("alias", "canonical")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class Settings(BaseModel):
    use_case: Optional[UseCase] = None
    matching: MatchConfig = MatchConfig()
    cache: MatcherCacheConfig = MatcherCacheConfig()
    custom_aliases: List[CustomAliasSettings] = Field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Path:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    raise FileNotFoundError("Could not find config.yaml - pass --config explicitly.")
