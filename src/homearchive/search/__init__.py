"""Book search module."""

from .errors import (
    BookNotFound,
    CategoryNotFound,
    DependencyError,
    InvalidLimit,
    InvalidRange,
    InvalidRating,
    NotFoundError,
    QueryTooLong,
    SearchError,
    ValidationError,
)
from .history import SearchHistoryManager
from .manager import SearchManager, SearchState
from .records import BookRecord
from .schemas import (
    BookSearchItem,
    PopularQuery,
    SearchFilters,
    SearchHistoryItem,
    SearchQuery,
    SearchResponse,
    SortBy,
    SortOrder,
)
from .sources import BookDataSource, DatabaseBookSource

__all__ = [
    "SearchManager",
    "SearchState",
    "SearchHistoryManager",
    "BookDataSource",
    "DatabaseBookSource",
    "BookRecord",
    "SearchQuery",
    "SearchFilters",
    "SearchResponse",
    "BookSearchItem",
    "SearchHistoryItem",
    "PopularQuery",
    "SortBy",
    "SortOrder",
    "SearchError",
    "ValidationError",
    "QueryTooLong",
    "InvalidLimit",
    "InvalidRange",
    "InvalidRating",
    "NotFoundError",
    "CategoryNotFound",
    "BookNotFound",
    "DependencyError",
]
