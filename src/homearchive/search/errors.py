"""Errors raised by the search engine.

Validation and not-found errors are raised before any data access.
Dependency errors wrap failures of the storage or membership collaborators.
"""

from typing import Optional


class SearchError(Exception):
    """Base class for all search errors."""


# --- Validation ---


class ValidationError(SearchError):
    """The search request is malformed."""


class QueryTooLong(ValidationError):
    """Raw query exceeds the maximum length."""

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(
            f"Search query must not exceed {max_length} characters (got {length})"
        )


class InvalidLimit(ValidationError):
    """Requested result limit is outside the allowed range."""

    def __init__(self, limit: int, max_limit: int):
        self.limit = limit
        self.max_limit = max_limit
        super().__init__(f"Limit must be between 1 and {max_limit} (got {limit})")


class InvalidRange(ValidationError):
    """Publication year range is inverted."""

    def __init__(self, year_from: int, year_to: int):
        self.year_from = year_from
        self.year_to = year_to
        super().__init__(
            f"year_from ({year_from}) must not be greater than year_to ({year_to})"
        )


class InvalidRating(ValidationError):
    """Minimum rating is outside [0, 5]."""

    def __init__(self, min_rating: float):
        self.min_rating = min_rating
        super().__init__(f"min_rating must be between 0 and 5 (got {min_rating})")


# --- Not found ---


class NotFoundError(SearchError):
    """A referenced entity does not exist."""


class CategoryNotFound(NotFoundError):
    """Category filter references an unknown category."""

    def __init__(self, category_id: int):
        self.category_id = category_id
        super().__init__(f"Category not found: {category_id}")


class BookNotFound(NotFoundError):
    """Referenced book does not exist."""

    def __init__(self, book_id: str):
        self.book_id = book_id
        super().__init__(f"Book not found: {book_id}")


# --- Dependencies ---


class DependencyError(SearchError):
    """A collaborator (storage, membership oracle) failed."""

    def __init__(self, dependency: str, detail: Optional[str] = None):
        self.dependency = dependency
        message = f"{dependency} is unavailable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
