"""Result ordering and truncation."""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence

from .records import BookRecord
from .schemas import SortBy, SortOrder
from .scorer import ScoredCandidate

# Hard ceiling on a single page of results
MAX_RESULTS = 50


@dataclass(frozen=True)
class RankedPage:
    """A truncated page of ranked items."""

    items: list
    total_matches: int
    has_more: bool


def tie_break_key(record: BookRecord) -> tuple[str, str]:
    """Title ascending, case-insensitive; id keeps equal titles stable."""
    return (record.title.lower(), record.id)


_SORT_FIELDS: dict[SortBy, Callable[[BookRecord], Optional[Any]]] = {
    SortBy.TITLE: lambda r: r.title.lower(),
    SortBy.AUTHOR: lambda r: r.author.lower() if r.author else None,
    SortBy.PUBLICATION_YEAR: lambda r: r.publication_year,
    SortBy.DATE_ADDED: lambda r: r.date_added,
    SortBy.RATING: lambda r: r.average_rating,
}


def rank_by_relevance(candidates: Iterable[ScoredCandidate]) -> list[ScoredCandidate]:
    """Order by score descending, then title ascending."""
    return sorted(candidates, key=lambda c: (-c.score, *tie_break_key(c.record)))


def sort_alphabetically(records: Iterable[BookRecord]) -> list[BookRecord]:
    """Order records by title ascending."""
    return sorted(records, key=tie_break_key)


def sort_by_field(
    records: Iterable[BookRecord], sort_by: SortBy, sort_order: SortOrder
) -> list[BookRecord]:
    """Order records on a field, bypassing relevance.

    Records missing the field go last in either direction. Ties keep
    title-ascending order.

    Raises:
        ValueError: If sort_by is RELEVANCE.
    """
    if sort_by not in _SORT_FIELDS:
        raise ValueError(f"Cannot sort on {sort_by.value} without scores")

    key = _SORT_FIELDS[sort_by]
    ordered = sort_alphabetically(records)
    present = [r for r in ordered if key(r) is not None]
    missing = [r for r in ordered if key(r) is None]

    # list.sort is stable in both directions, so title order survives ties
    present.sort(key=key, reverse=sort_order == SortOrder.DESC)
    return present + missing


def truncate(items: Sequence, limit: int) -> RankedPage:
    """Cut ranked items down to at most min(limit, MAX_RESULTS)."""
    ceiling = max(0, min(limit, MAX_RESULTS))
    page = list(items[:ceiling])
    return RankedPage(
        items=page,
        total_matches=len(items),
        has_more=len(items) > len(page),
    )
