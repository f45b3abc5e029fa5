"""Schemas for book search requests and responses."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..db.schemas import PhysicalLocation


class SortBy(str, Enum):
    """Sort options for search results."""

    RELEVANCE = "relevance"
    TITLE = "title"
    AUTHOR = "author"
    PUBLICATION_YEAR = "publication_year"
    DATE_ADDED = "date_added"
    RATING = "rating"


class SortOrder(str, Enum):
    """Sort order for results."""

    ASC = "asc"
    DESC = "desc"


# --- Search Query Schemas ---


class SearchFilters(BaseModel):
    """Structural (non-text) filters, combined with AND."""

    model_config = ConfigDict(frozen=True)

    author: Optional[str] = None
    category: Optional[int] = None
    year_from: Optional[int] = None
    year_to: Optional[int] = None
    min_rating: Optional[float] = None
    physical_location: Optional[PhysicalLocation] = None

    def is_empty(self) -> bool:
        """True when no filter is set."""
        return all(
            value is None
            for value in (
                self.author,
                self.category,
                self.year_from,
                self.year_to,
                self.min_rating,
                self.physical_location,
            )
        )


class SearchQuery(BaseModel):
    """Schema for a search request.

    Range checks on the query length, limit, years and rating happen in the
    search manager so they surface as typed search errors.
    """

    model_config = ConfigDict(frozen=True)

    query: Optional[str] = ""
    sort_by: SortBy = SortBy.RELEVANCE
    sort_order: SortOrder = SortOrder.DESC
    limit: int = 50

    # Filters
    author: Optional[str] = None
    category: Optional[int] = None
    year_from: Optional[int] = None
    year_to: Optional[int] = None
    min_rating: Optional[float] = None
    physical_location: Optional[PhysicalLocation] = None

    @property
    def filters(self) -> SearchFilters:
        """Structural filters of this query."""
        return SearchFilters(
            author=self.author,
            category=self.category,
            year_from=self.year_from,
            year_to=self.year_to,
            min_rating=self.min_rating,
            physical_location=self.physical_location,
        )


# --- Search Result Schemas ---


class BookSearchItem(BaseModel):
    """A single book in a search response."""

    id: str
    title: str
    author: str
    genre: Optional[str] = None
    publication_year: Optional[int] = None
    isbn: Optional[str] = None
    publisher: Optional[str] = None
    physical_location: Optional[str] = None
    in_user_library: Optional[bool] = None


class SearchResponse(BaseModel):
    """Ordered, truncated search results."""

    query: str
    result_count: int
    total_results: int
    has_more: bool
    results: list[BookSearchItem]
    sort_by: SortBy
    sort_order: SortOrder
    no_results: bool = False
    search_time_ms: float = Field(default=0.0, ge=0)


# --- Search History ---


class SearchHistoryItem(BaseModel):
    """An item in search history."""

    query: str
    user_id: Optional[str] = None
    result_count: int
    searched_at: datetime


class PopularQuery(BaseModel):
    """A query and how often it was searched."""

    query: str
    count: int
