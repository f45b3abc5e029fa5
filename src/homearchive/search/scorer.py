"""Relevance scoring.

score = TERM_MATCH_WEIGHT * matched terms
      + exact-match bonuses
      + PARTIAL_SCALE * (weighted field hits / best possible field hits)

The partial part never reaches TERM_MATCH_WEIGHT, so a record matching more
distinct terms always outranks one matching fewer. Exact matches imply every
term matched, and each exact bonus exceeds the sum of the bonuses below it:
exact title > exact author > exact genre > exact ISBN > partial matches.
"""

from dataclasses import dataclass
from typing import Iterable

from .matcher import MatchResult
from .normalizer import NormalizedQuery
from .records import BookRecord

TERM_MATCH_WEIGHT = 20.0
PARTIAL_SCALE = 10.0

EXACT_MATCH_BONUS = {
    "title": 800.0,
    "author": 400.0,
    "genre": 200.0,
    "isbn": 100.0,
}

FIELD_WEIGHTS = {
    "title": 3.0,
    "author": 2.0,
    "genre": 1.5,
    "isbn": 1.0,
    "publisher": 1.0,
    "description": 1.0,
}

# Multiplier for a term found inside a word rather than at its start
MID_WORD_FACTOR = 0.5

_MAX_FIELD_WEIGHT = sum(FIELD_WEIGHTS.values())


@dataclass(frozen=True)
class ScoredCandidate:
    """A matched record with its relevance score."""

    record: BookRecord
    score: float
    matched_fields: frozenset[str]


def calculate_relevance(match: MatchResult, term_count: int) -> float:
    """Score a match.

    Args:
        match: Matcher output for the record
        term_count: Number of terms in the normalized query

    Returns:
        Non-negative relevance score
    """
    partial = 0.0
    # Sorted iteration keeps float sums identical between runs
    for term in sorted(match.term_fields):
        for name in sorted(match.term_fields[term]):
            factor = 1.0 if (term, name) in match.word_start_hits else MID_WORD_FACTOR
            partial += FIELD_WEIGHTS[name] * factor

    score = TERM_MATCH_WEIGHT * len(match.term_fields)
    for name in sorted(match.exact_fields):
        score += EXACT_MATCH_BONUS[name]
    if term_count:
        score += PARTIAL_SCALE * partial / (term_count * _MAX_FIELD_WEIGHT)
    return score


def score_candidates(
    matches: Iterable[tuple[BookRecord, MatchResult]], query: NormalizedQuery
) -> list[ScoredCandidate]:
    """Score every matched record."""
    term_count = len(query.terms)
    return [
        ScoredCandidate(
            record=record,
            score=calculate_relevance(match, term_count),
            matched_fields=match.matched_fields,
        )
        for record, match in matches
    ]
