"""
Text normalization for consistent name comparison.

Every step is a pure function and can be toggled through
`NormalizationConfig`. Two presets cover the common cases:

- `normalize_for_matching`: the full pipeline, used for every comparison
- `normalize_for_display`: whitespace cleanup only

Examples:
    "The Beatles"      → "beatles"
    "Mötley Crüe"      → "motley crue"
    "Guns N' Roses"    → "guns n roses"
    "Москва"           → "moskva"
"""

from __future__ import annotations

import re
import unicodedata
from functools import lru_cache
from typing import Optional

from ...config import NormalizationConfig

ARTICLES = frozenset({"a", "an", "the"})

STOP_WORDS = frozenset(
    {
        "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by", "from",
        "up", "about", "into", "through", "during", "before", "after", "above", "below",
        "between", "among", "under", "over", "against", "within", "without",
    }
)

UNICODE_MAP: dict[str, str] = {
    # Latin with diacritics
    "à": "a", "á": "a", "â": "a", "ã": "a", "ä": "a", "å": "a", "æ": "ae",
    "ç": "c",
    "è": "e", "é": "e", "ê": "e", "ë": "e",
    "ì": "i", "í": "i", "î": "i", "ï": "i",
    "ñ": "n",
    "ò": "o", "ó": "o", "ô": "o", "õ": "o", "ö": "o", "ø": "o", "œ": "oe",
    "ù": "u", "ú": "u", "û": "u", "ü": "u",
    "ý": "y", "ÿ": "y",
    # German
    "ß": "ss",
    # Scandinavian / Icelandic
    "ð": "d", "þ": "th",
    # Eastern European
    "č": "c", "ć": "c", "ď": "d", "đ": "d",
    "ě": "e", "ę": "e", "ė": "e",
    "ğ": "g",
    "ħ": "h",
    "ı": "i", "į": "i",
    "ł": "l", "ľ": "l", "ĺ": "l",
    "ň": "n", "ń": "n", "ņ": "n",
    "ř": "r", "ŕ": "r",
    "š": "s", "ś": "s", "ş": "s",
    "ť": "t", "ţ": "t",
    "ů": "u", "ű": "u", "ų": "u",
    "ž": "z", "ź": "z", "ż": "z",
    # Cyrillic transliteration
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e", "ё": "yo",
    "ж": "zh", "з": "z", "и": "i", "й": "y", "к": "k", "л": "l", "м": "m",
    "н": "n", "о": "o", "п": "p", "р": "r", "с": "s", "т": "t", "у": "u",
    "ф": "f", "х": "kh", "ц": "ts", "ч": "ch", "ш": "sh", "щ": "shch",
    "ъ": "", "ы": "y", "ь": "", "э": "e", "ю": "yu", "я": "ya",
}


def _build_translation() -> dict[int, str]:
    table: dict[int, str] = {}
    for char, ascii_value in UNICODE_MAP.items():
        table[ord(char)] = ascii_value
        upper = char.upper()
        # ß upper-cases to "SS"; only single code point forms get an entry
        if len(upper) == 1 and upper != char and ord(upper) not in table:
            table[ord(upper)] = ascii_value[:1].upper() + ascii_value[1:]
    return table


_TRANSLATION = _build_translation()

_PUNCTUATION_RE = re.compile(r"[^\w\s'-]")
_SEPARATOR_RE = re.compile(r"[-']+")
_WHITESPACE_RE = re.compile(r"\s+")


def convert_unicode(text: str) -> str:
    if not text:
        return ""
    return text.translate(_TRANSLATION)


def remove_accents(text: str) -> str:
    """Strip combining marks, then fall back to the lookup table for letters that do not decompose (ø, ł, đ...)."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.translate(_TRANSLATION)


def remove_punctuation(text: str) -> str:
    if not text:
        return ""
    cleaned = _PUNCTUATION_RE.sub(" ", text)
    cleaned = _SEPARATOR_RE.sub(" ", cleaned)
    return _WHITESPACE_RE.sub(" ", cleaned)


def normalize_whitespace(text: str) -> str:
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def remove_articles(text: str) -> str:
    """
    Drop leading and trailing articles while at least one other word remains.

    Examples:
        "The Beatles"   → "Beatles"
        "Beatles The"   → "Beatles"
        "The A Team"    → "Team"
        "The"           → "The"
    """
    if not text:
        return ""
    words = text.split()
    if len(words) <= 1:
        return text
    while len(words) > 1 and words[0].lower() in ARTICLES:
        words.pop(0)
    while len(words) > 1 and words[-1].lower() in ARTICLES:
        words.pop()
    return " ".join(words)


def remove_stop_words(text: str) -> str:
    if not text:
        return ""
    return " ".join(word for word in text.split() if word.lower() not in STOP_WORDS)


_DEFAULT_CONFIG = NormalizationConfig()
_DISPLAY_CONFIG = NormalizationConfig(
    convert_unicode=False,
    remove_accents=False,
    lowercase=False,
    remove_punctuation=False,
    normalize_whitespace=True,
    remove_articles=False,
    remove_stop_words=False,
)


def normalize_text(text: Optional[str], config: Optional[NormalizationConfig] = None) -> str:
    if not text:
        return ""
    cfg = config or _DEFAULT_CONFIG
    normalized = text
    if cfg.convert_unicode:
        normalized = convert_unicode(normalized)
    if cfg.remove_accents:
        normalized = remove_accents(normalized)
    if cfg.lowercase:
        normalized = normalized.lower()
    if cfg.remove_punctuation:
        normalized = remove_punctuation(normalized)
    if cfg.normalize_whitespace:
        normalized = normalize_whitespace(normalized)
    if cfg.remove_articles:
        normalized = remove_articles(normalized)
    if cfg.remove_stop_words:
        normalized = remove_stop_words(normalized)
    return normalize_whitespace(normalized)


@lru_cache(maxsize=8192)
def normalize_for_matching(text: Optional[str]) -> str:
    return normalize_text(text, _DEFAULT_CONFIG)


def normalize_for_display(text: Optional[str]) -> str:
    return normalize_text(text, _DISPLAY_CONFIG)


def generate_variations(text: Optional[str]) -> list[str]:
    """
    Produce the distinct normalization levels of `text`, least processed first.

    Useful when a lookup wants to try several spellings of the same input.
    """
    if not text:
        return []
    lowered = text.lower()
    no_punct = remove_punctuation(text)
    no_articles = remove_articles(lowered)
    candidates = [
        text,
        lowered,
        remove_accents(text),
        remove_accents(lowered),
        no_punct,
        no_punct.lower(),
        normalize_for_matching(text),
        no_articles,
        normalize_for_matching(no_articles),
    ]
    seen: set[str] = set()
    variations: list[str] = []
    for candidate in candidates:
        if not candidate.strip() or candidate in seen:
            continue
        seen.add(candidate)
        variations.append(candidate)
    return variations
