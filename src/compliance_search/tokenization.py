"""Bilingual (English/Khmer) tokenization shared by the indices."""

import re
from typing import List, Optional

from .models import Language

# Khmer vowel signs and diacritics are combining marks, not word characters,
# so the Khmer blocks are kept explicitly.
_KHMER_RANGES = "\u1780-\u17ff\u19e0-\u19ff"
_STRIP_PATTERN = re.compile(rf"[^\w\s{_KHMER_RANGES}]")
_KHMER_PATTERN = re.compile(rf"[{_KHMER_RANGES}]")

DEFAULT_MIN_TOKEN_LENGTH = 3


def tokenize(
    text: str,
    language: Optional[Language] = None,
    min_length: int = DEFAULT_MIN_TOKEN_LENGTH,
) -> List[str]:
    """Lower-case, strip punctuation, split on whitespace and drop short tokens.

    The same rules apply to both languages; ``language`` is accepted so
    callers can pass the query language through, but Khmer text is
    recognized by script rather than by the flag.
    """
    if not text:
        return []
    cleaned = _STRIP_PATTERN.sub("", text.lower())
    return [token for token in cleaned.split() if len(token) >= min_length]


def whitespace_tokens(text: str) -> List[str]:
    """Lower-cased whitespace split, used by the term-overlap similarity."""
    if not text:
        return []
    return text.lower().split()


def contains_khmer(text: str) -> bool:
    return bool(text) and _KHMER_PATTERN.search(text) is not None


def detect_language(text: str) -> Language:
    """Guess the query language from its script."""
    return Language.KM if contains_khmer(text) else Language.EN
