"""Field matching.

Works out which query terms match which fields of a record. A term matches a
field when the cleaned field value contains it, so partial words match
("harr" finds "Harry"). ISBNs also match exactly, ignoring separators.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .normalizer import NormalizedQuery, clean_text, isbn_key
from .records import BookRecord

SEARCHABLE_FIELDS = ("title", "author", "genre", "isbn", "publisher", "description")

# Fields eligible for the whole-query exact match bonus
EXACT_FIELDS = ("title", "author", "genre")


@dataclass(frozen=True)
class MatchResult:
    """Terms and fields a record matched."""

    term_fields: dict[str, frozenset[str]]
    exact_fields: frozenset[str] = frozenset()
    word_start_hits: frozenset[tuple[str, str]] = field(default_factory=frozenset)

    @property
    def matched_terms(self) -> frozenset[str]:
        return frozenset(self.term_fields)

    @property
    def matched_fields(self) -> frozenset[str]:
        fields: set[str] = set()
        for names in self.term_fields.values():
            fields.update(names)
        return frozenset(fields | self.exact_fields)


def field_values(record: BookRecord) -> dict[str, str]:
    """Cleaned values of the searchable fields, skipping empty ones.

    Fields go through the same allow-list as the query so both sides agree.
    """
    values = {}
    for name in SEARCHABLE_FIELDS:
        cleaned = clean_text(getattr(record, name))
        if cleaned:
            values[name] = cleaned
    return values


def _starts_word(value: str, term: str) -> bool:
    return value.startswith(term) or f" {term}" in value


def match_record(record: BookRecord, query: NormalizedQuery) -> Optional[MatchResult]:
    """Match a record against a non-empty normalized query.

    Args:
        record: Candidate record
        query: Normalized query with at least one term

    Returns:
        MatchResult, or None when no term matches any field
    """
    values = field_values(record)
    term_fields: dict[str, frozenset[str]] = {}
    word_start_hits: set[tuple[str, str]] = set()

    for term in query.terms:
        matched = []
        for name, value in values.items():
            if term in value:
                matched.append(name)
                if _starts_word(value, term):
                    word_start_hits.add((term, name))
        if matched:
            term_fields[term] = frozenset(matched)

    exact: set[str] = set()
    for name in EXACT_FIELDS:
        if values.get(name) == query.text:
            exact.add(name)

    # A complete ISBN identifies the book
    if record.isbn and query.isbn_key and isbn_key(record.isbn) == query.isbn_key:
        exact.add("isbn")

    # An exact field match counts every term as matched on that field
    for name in exact:
        for term in query.terms:
            term_fields[term] = term_fields.get(term, frozenset()) | {name}
            word_start_hits.add((term, name))

    if not term_fields:
        return None

    return MatchResult(
        term_fields=term_fields,
        exact_fields=frozenset(exact),
        word_start_hits=frozenset(word_start_hits),
    )


def match_records(
    records: Iterable[BookRecord], query: NormalizedQuery
) -> list[tuple[BookRecord, MatchResult]]:
    """Keep the records matching at least one term, with their matches."""
    matches = []
    for record in records:
        result = match_record(record, query)
        if result is not None:
            matches.append((record, result))
    return matches


def field_contains(record: BookRecord, field_name: str, needle: str) -> bool:
    """Substring test on a single field, both sides cleaned."""
    value = getattr(record, field_name)
    if not value or not needle:
        return False
    needle = clean_text(needle)
    return bool(needle) and needle in clean_text(value)
