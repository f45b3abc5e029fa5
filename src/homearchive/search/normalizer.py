"""Query normalization.

Validates the raw query length, strips characters outside the allow-list,
collapses whitespace and splits the result into search terms.
"""

import re
from dataclasses import dataclass
from typing import Optional

from .errors import QueryTooLong

MAX_QUERY_LENGTH = 100

# Letters, digits, whitespace and - ' . survive; everything else is dropped
_DISALLOWED_CHARS = re.compile(r"[^\w\s\-'.]|_")
_WHITESPACE = re.compile(r"\s+")
_ISBN_SEPARATORS = re.compile(r"[-\s]")
_HAS_ALNUM = re.compile(r"[^\W_]")

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "book", "books", "novel", "story", "tale",
        "reading", "read", "author", "writer",
    }
)


@dataclass(frozen=True)
class NormalizedQuery:
    """A cleaned query ready for matching."""

    original: str
    text: str
    terms: tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        # Punctuation-only input leaves no terms and counts as empty
        return not self.terms

    @property
    def isbn_key(self) -> str:
        """Query text with ISBN separators removed."""
        return isbn_key(self.text)


def clean_text(value: Optional[str]) -> str:
    """Apply the allow-list, collapse whitespace and lowercase."""
    if not value:
        return ""
    cleaned = _DISALLOWED_CHARS.sub("", value)
    return _WHITESPACE.sub(" ", cleaned).strip().lower()


def isbn_key(value: Optional[str]) -> str:
    """Lowercase ISBN with hyphens and whitespace removed."""
    if not value:
        return ""
    return _ISBN_SEPARATORS.sub("", value).lower()


def split_terms(text: str) -> tuple[str, ...]:
    """Split cleaned text into distinct search terms.

    Multi-word queries drop stop words and single characters unless that
    would leave nothing to search for.
    """
    raw_terms: list[str] = []
    for term in text.split():
        if _HAS_ALNUM.search(term) and term not in raw_terms:
            raw_terms.append(term)

    if len(raw_terms) <= 1:
        return tuple(raw_terms)

    filtered = [t for t in raw_terms if len(t) >= 2 and t not in STOP_WORDS]
    return tuple(filtered or raw_terms)


def normalize_query(raw: Optional[str]) -> NormalizedQuery:
    """Validate and normalize a raw query string.

    Args:
        raw: Query as typed by the caller. None is treated as empty.

    Returns:
        NormalizedQuery

    Raises:
        QueryTooLong: If the raw query exceeds MAX_QUERY_LENGTH characters.
    """
    raw = raw or ""
    if len(raw) > MAX_QUERY_LENGTH:
        raise QueryTooLong(len(raw), MAX_QUERY_LENGTH)

    text = clean_text(raw)
    return NormalizedQuery(original=raw.strip(), text=text, terms=split_terms(text))
