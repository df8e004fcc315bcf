"""
Text normalization and token similarity for vendor/description matching.

Bank descriptions and supplier names arrive in mixed Greek and Latin
script, with or without accents. Everything is reduced to unaccented
lowercase letters and digits before comparison.
"""

from typing import Optional
import re
import unicodedata

# Latin a-z, Greek alpha to omega (final sigma included), digits, whitespace
_DISALLOWED = re.compile(r"[^a-zα-ω0-9\s]")

MIN_TOKEN_LENGTH = 3


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, strip diacritics and punctuation, trim."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", str(text).lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _DISALLOWED.sub("", stripped).strip()


def tokenize(text: Optional[str]) -> set[str]:
    """Set of normalized words, ignoring words shorter than three characters."""
    return {
        word for word in normalize_text(text).split() if len(word) >= MIN_TOKEN_LENGTH
    }


def jaccard_similarity(text1: Optional[str], text2: Optional[str]) -> float:
    """
    Word-overlap similarity (intersection over union).

    Returns 0.0 when either side has no usable words.
    """
    words1 = tokenize(text1)
    words2 = tokenize(text2)

    if not words1 or not words2:
        return 0.0

    return len(words1 & words2) / len(words1 | words2)
