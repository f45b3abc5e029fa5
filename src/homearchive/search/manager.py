"""Manager for book search operations."""

import logging
import time
from enum import Enum
from typing import Callable, Optional

from ..config import get_config
from ..db.sqlite import Database, get_db
from ..library.manager import LibraryManager
from .errors import (
    BookNotFound,
    CategoryNotFound,
    DependencyError,
    InvalidLimit,
    SearchError,
)
from .filters import apply_filters, validate_filters
from .matcher import field_contains, match_records
from .membership import MembershipOracle, annotate_membership
from .normalizer import NormalizedQuery, normalize_query
from .ranker import (
    MAX_RESULTS,
    rank_by_relevance,
    sort_alphabetically,
    sort_by_field,
    tie_break_key,
    truncate,
)
from .records import BookRecord
from .schemas import BookSearchItem, SearchFilters, SearchQuery, SearchResponse, SortBy
from .scorer import score_candidates
from .sources import BookDataSource, DatabaseBookSource

logger = logging.getLogger(__name__)


class SearchState(str, Enum):
    """Stages of a single search request."""

    RECEIVED = "received"
    NORMALIZED = "normalized"
    EMPTY_QUERY_PATH = "empty_query_path"
    QUERY_PATH = "query_path"
    FILTERED = "filtered"
    SCORED = "scored"
    RANKED = "ranked"
    ANNOTATED = "annotated"
    RETURNED = "returned"
    ERROR = "error"


class SearchManager:
    """Runs book searches from raw request to annotated response."""

    def __init__(
        self,
        db: Optional[Database] = None,
        source: Optional[BookDataSource] = None,
        membership: Optional[MembershipOracle] = None,
        max_results: Optional[int] = None,
    ):
        """Initialize search manager.

        Args:
            db: Database instance, used when no source is given
            source: Book data source
            membership: Ownership lookup for annotating results
            max_results: Result ceiling, never above MAX_RESULTS
        """
        if source is None:
            db = db or get_db()
            source = DatabaseBookSource(db)
            if membership is None:
                membership = LibraryManager(db)

        self.source = source
        self.membership = membership

        if max_results is None:
            max_results = get_config().max_results
        self.max_results = max(1, min(max_results, MAX_RESULTS))

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search(self, query: SearchQuery, user_id: Optional[str] = None) -> SearchResponse:
        """Search books by free text and structural filters.

        Args:
            query: Search request
            user_id: Requesting user, or None for anonymous searches

        Returns:
            SearchResponse with at most max_results items

        Raises:
            ValidationError: If the request is malformed.
            NotFoundError: If the category filter references an unknown category.
            DependencyError: If storage or the membership oracle fails.
        """
        start_time = time.time()
        self._enter(SearchState.RECEIVED)

        try:
            normalized, filters = self._validate(query)
            self._enter(SearchState.NORMALIZED)

            if normalized.is_empty:
                self._enter(SearchState.EMPTY_QUERY_PATH)
            else:
                self._enter(SearchState.QUERY_PATH)

            records = apply_filters(self._fetch(filters), filters)
            self._enter(SearchState.FILTERED)

            ordered = self._order(records, normalized, query)
            page = truncate(ordered, min(query.limit, self.max_results))
            self._enter(SearchState.RANKED)

            items = annotate_membership(page.items, user_id, self.membership)
            self._enter(SearchState.ANNOTATED)
        except SearchError as e:
            self._enter(SearchState.ERROR, detail=str(e))
            raise

        response = SearchResponse(
            query=normalized.original,
            result_count=len(items),
            total_results=page.total_matches,
            has_more=page.has_more,
            results=items,
            sort_by=query.sort_by,
            sort_order=query.sort_order,
            no_results=not items,
            search_time_ms=(time.time() - start_time) * 1000,
        )
        self._enter(SearchState.RETURNED)

        if response.no_results and not normalized.is_empty:
            logger.info("No results found for query: '%s'", normalized.original)
        logger.debug(
            "Search for '%s' returned %d of %d matches",
            normalized.original,
            response.result_count,
            response.total_results,
        )
        return response

    # -------------------------------------------------------------------------
    # Field-Specific Search
    # -------------------------------------------------------------------------

    def search_by_title(
        self, title: str, limit: int = MAX_RESULTS, user_id: Optional[str] = None
    ) -> list[BookSearchItem]:
        """Books whose title contains the text, ordered by title."""
        return self._search_field("title", title, limit, user_id)

    def search_by_author(
        self, author: str, limit: int = MAX_RESULTS, user_id: Optional[str] = None
    ) -> list[BookSearchItem]:
        """Books whose author contains the text, ordered by author then title."""
        return self._search_field(
            "author",
            author,
            limit,
            user_id,
            order=lambda records: sorted(
                records, key=lambda r: (r.author.lower(), *tie_break_key(r))
            ),
        )

    def search_by_genre(
        self, genre: str, limit: int = MAX_RESULTS, user_id: Optional[str] = None
    ) -> list[BookSearchItem]:
        """Books whose genre contains the text, ordered by title."""
        return self._search_field("genre", genre, limit, user_id)

    def find_similar(
        self, book_id: str, limit: int = 10, user_id: Optional[str] = None
    ) -> list[BookSearchItem]:
        """Books sharing the reference book's author or category.

        Args:
            book_id: Reference book
            limit: Maximum results, capped at max_results
            user_id: Requesting user, or None

        Returns:
            Similar books ordered by title, excluding the reference book

        Raises:
            BookNotFound: If the reference book does not exist.
        """
        self._check_positive_limit(limit)
        reference = self._call_source(lambda: self.source.get_record(book_id))
        if reference is None:
            raise BookNotFound(book_id)

        author = reference.author.lower()
        similar = [
            r
            for r in self._fetch(SearchFilters())
            if r.id != reference.id
            and (
                r.author.lower() == author
                or (reference.category_id is not None and r.category_id == reference.category_id)
            )
        ]
        page = truncate(sort_alphabetically(similar), min(limit, self.max_results))
        return annotate_membership(page.items, user_id, self.membership)

    # -------------------------------------------------------------------------
    # Helper Methods
    # -------------------------------------------------------------------------

    def _validate(self, query: SearchQuery) -> tuple[NormalizedQuery, SearchFilters]:
        """Run every check that must pass before data is fetched."""
        normalized = normalize_query(query.query)
        self._validate_limit(query.limit)

        filters = query.filters
        validate_filters(filters)

        if filters.category is not None:
            exists = self._call_source(lambda: self.source.category_exists(filters.category))
            if not exists:
                raise CategoryNotFound(filters.category)

        return normalized, filters

    def _validate_limit(self, limit: int) -> None:
        if limit < 1 or limit > MAX_RESULTS:
            raise InvalidLimit(limit, MAX_RESULTS)

    def _check_positive_limit(self, limit: int) -> None:
        # Limits above the ceiling are capped by truncate
        if limit < 1:
            raise InvalidLimit(limit, MAX_RESULTS)

    def _order(
        self, records: list[BookRecord], normalized: NormalizedQuery, query: SearchQuery
    ) -> list[BookRecord]:
        """Order filtered records according to the search path."""
        if normalized.is_empty:
            if query.sort_by == SortBy.RELEVANCE:
                return sort_alphabetically(records)
            return sort_by_field(records, query.sort_by, query.sort_order)

        matches = match_records(records, normalized)

        if query.sort_by != SortBy.RELEVANCE:
            return sort_by_field([record for record, _ in matches], query.sort_by, query.sort_order)

        scored = score_candidates(matches, normalized)
        self._enter(SearchState.SCORED)
        return [candidate.record for candidate in rank_by_relevance(scored)]

    def _search_field(
        self,
        field_name: str,
        value: str,
        limit: int,
        user_id: Optional[str],
        order: Callable[[list[BookRecord]], list[BookRecord]] = sort_alphabetically,
    ) -> list[BookSearchItem]:
        normalized = normalize_query(value)
        self._check_positive_limit(limit)
        if normalized.is_empty:
            return []

        matched = [
            r for r in self._fetch(SearchFilters()) if field_contains(r, field_name, normalized.text)
        ]
        page = truncate(order(matched), min(limit, self.max_results))
        logger.debug("%s search for '%s' matched %d books", field_name, value, page.total_matches)
        return annotate_membership(page.items, user_id, self.membership)

    def _fetch(self, filters: SearchFilters) -> list[BookRecord]:
        return list(self._call_source(lambda: self.source.fetch_candidates(filters)))

    def _call_source(self, call: Callable):
        """Invoke the data source, turning unexpected failures into DependencyError."""
        try:
            return call()
        except SearchError:
            raise
        except Exception as e:
            logger.exception("Book data source failed")
            raise DependencyError("book storage", str(e)) from e

    def _enter(self, state: SearchState, detail: Optional[str] = None) -> None:
        if detail:
            logger.debug("Search state -> %s (%s)", state.value, detail)
        else:
            logger.debug("Search state -> %s", state.value)
