"""Structural filters.

Category, publication year range, rating floor, physical location and author
are combined with AND. Each is optional and independent of text matching.
"""

from typing import Iterable

from .errors import InvalidRange, InvalidRating
from .records import BookRecord
from .schemas import SearchFilters

MIN_RATING = 0.0
MAX_RATING = 5.0


def validate_filters(filters: SearchFilters) -> None:
    """Check filter values before any data is fetched.

    Raises:
        InvalidRange: If year_from is greater than year_to.
        InvalidRating: If min_rating is outside [0, 5].
    """
    if (
        filters.year_from is not None
        and filters.year_to is not None
        and filters.year_from > filters.year_to
    ):
        raise InvalidRange(filters.year_from, filters.year_to)

    if filters.min_rating is not None and not (
        MIN_RATING <= filters.min_rating <= MAX_RATING
    ):
        raise InvalidRating(filters.min_rating)


def matches_filters(record: BookRecord, filters: SearchFilters) -> bool:
    """Return True when the record passes every set filter."""
    if filters.category is not None and record.category_id != filters.category:
        return False

    if filters.year_from is not None or filters.year_to is not None:
        year = record.publication_year
        if year is None:
            return False
        if filters.year_from is not None and year < filters.year_from:
            return False
        if filters.year_to is not None and year > filters.year_to:
            return False

    if filters.min_rating is not None:
        if record.average_rating is None or record.average_rating < filters.min_rating:
            return False

    if filters.physical_location is not None:
        if record.physical_location != filters.physical_location.value:
            return False

    if filters.author:
        if filters.author.lower() not in (record.author or "").lower():
            return False

    return True


def apply_filters(records: Iterable[BookRecord], filters: SearchFilters) -> list[BookRecord]:
    """Keep the records passing all filters, preserving input order."""
    if filters.is_empty():
        return list(records)
    return [r for r in records if matches_filters(r, filters)]
