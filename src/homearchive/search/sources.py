"""Data sources feeding the search engine."""

import logging
from typing import Optional, Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ..db.models import Book, Category
from ..db.sqlite import Database, get_db
from .errors import DependencyError
from .records import BookRecord
from .schemas import SearchFilters

logger = logging.getLogger(__name__)


class BookDataSource(Protocol):
    """Read-only access to book records."""

    def fetch_candidates(self, filters: SearchFilters) -> Sequence[BookRecord]:
        """Records that may match; pushing filters down is optional."""
        ...

    def category_exists(self, category_id: int) -> bool:
        ...

    def get_record(self, book_id: str) -> Optional[BookRecord]:
        ...


class DatabaseBookSource:
    """Book data source backed by the SQLite archive."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize data source.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def fetch_candidates(self, filters: SearchFilters) -> list[BookRecord]:
        """Fetch books, pushing structural filters into SQL.

        The author filter is left to the in-process compositor since SQLite's
        lower() only folds ASCII.

        Raises:
            DependencyError: If the database query fails.
        """
        stmt = select(Book)

        if filters.category is not None:
            stmt = stmt.where(Book.category_id == filters.category)
        if filters.year_from is not None:
            stmt = stmt.where(Book.publication_year >= filters.year_from)
        if filters.year_to is not None:
            stmt = stmt.where(Book.publication_year <= filters.year_to)
        if filters.min_rating is not None:
            stmt = stmt.where(Book.average_rating >= filters.min_rating)
        if filters.physical_location is not None:
            stmt = stmt.where(Book.physical_location == filters.physical_location.value)

        try:
            with self.db.get_session() as session:
                books = session.execute(stmt).scalars().all()
                records = [BookRecord.from_model(book) for book in books]
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch search candidates")
            raise DependencyError("book storage", str(e)) from e

        logger.debug("Fetched %d candidate records", len(records))
        return records

    def category_exists(self, category_id: int) -> bool:
        """Check whether a category id is known.

        Raises:
            DependencyError: If the database query fails.
        """
        try:
            with self.db.get_session() as session:
                return session.get(Category, category_id) is not None
        except SQLAlchemyError as e:
            logger.exception("Failed to look up category %s", category_id)
            raise DependencyError("book storage", str(e)) from e

    def get_record(self, book_id: str) -> Optional[BookRecord]:
        """Get a single record by id.

        Raises:
            DependencyError: If the database query fails.
        """
        try:
            with self.db.get_session() as session:
                book = session.get(Book, book_id)
                return BookRecord.from_model(book) if book else None
        except SQLAlchemyError as e:
            logger.exception("Failed to load book %s", book_id)
            raise DependencyError("book storage", str(e)) from e
