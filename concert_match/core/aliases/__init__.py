"""
Alias tables and resolution.

Built-in tables are static and read-only; custom aliases are layered on top
inside `AliasResolver` and are checked first.
"""

from __future__ import annotations

from .data import (
    ALL_ALIASES,
    ARTIST_ALIASES,
    CITY_ALIASES,
    VENUE_ALIASES,
    aliases_for_category,
    builtin_aliases_for,
    lookup_builtin,
)
from .resolver import (
    AliasResolver,
    default_resolver,
    resolve_aliases,
    resolve_any_alias,
    resolve_artist_alias,
    resolve_city_alias,
    resolve_venue_alias,
)

__all__ = [
    "ALL_ALIASES",
    "ARTIST_ALIASES",
    "AliasResolver",
    "CITY_ALIASES",
    "VENUE_ALIASES",
    "aliases_for_category",
    "builtin_aliases_for",
    "default_resolver",
    "lookup_builtin",
    "resolve_aliases",
    "resolve_any_alias",
    "resolve_artist_alias",
    "resolve_city_alias",
    "resolve_venue_alias",
]
