"""SQLite database operations.

Handles database connection, session management, and CRUD operations.
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base, Book, Category
from .schemas import BookCreate, CategoryCreate


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses
                     HOMEARCHIVE_DB_PATH env var or default location.
        """
        if db_path is None:
            db_path = os.environ.get(
                "HOMEARCHIVE_DB_PATH",
                str(Path.home() / ".homearchive" / "library.db"),
            )

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # In-memory databases need StaticPool so every session shares one connection
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all database tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Category Operations
    # ========================================================================

    def create_category(
        self, category: CategoryCreate, session: Optional[Session] = None
    ) -> Category:
        """Create a new category."""

        def _create(s: Session) -> Category:
            db_category = Category(name=category.name, description=category.description)
            s.add(db_category)
            s.flush()
            return db_category

        if session:
            return _create(session)
        else:
            with self.get_session() as s:
                db_category = _create(s)
                s.expunge(db_category)
                return db_category

    def get_category_by_name(
        self, name: str, session: Optional[Session] = None
    ) -> Optional[Category]:
        """Get a category by name (case-insensitive)."""

        def _get(s: Session) -> Optional[Category]:
            stmt = select(Category).where(func.lower(Category.name) == name.lower())
            return s.execute(stmt).scalar_one_or_none()

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                db_category = _get(s)
                if db_category:
                    s.expunge(db_category)
                return db_category

    def list_categories(self, session: Optional[Session] = None) -> list[Category]:
        """Get all categories ordered by name."""

        def _get(s: Session) -> list[Category]:
            stmt = select(Category).order_by(Category.name)
            return list(s.execute(stmt).scalars().all())

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                categories = _get(s)
                for db_category in categories:
                    s.expunge(db_category)
                return categories

    # ========================================================================
    # Book Operations
    # ========================================================================

    def create_book(self, book: BookCreate, session: Optional[Session] = None) -> Book:
        """Create a new book record."""

        def _create(s: Session) -> Book:
            db_book = Book(
                title=book.title,
                author=book.author,
                genre=book.genre,
                category_id=book.category_id,
                isbn=book.isbn,
                publisher=book.publisher,
                publication_year=book.publication_year,
                description=book.description,
                page_count=book.page_count,
                physical_location=(
                    book.physical_location.value if book.physical_location else None
                ),
                average_rating=book.average_rating,
                rating_count=book.rating_count,
            )
            if book.date_added:
                db_book.date_added = book.date_added.isoformat()

            s.add(db_book)
            s.flush()
            return db_book

        if session:
            return _create(session)
        else:
            with self.get_session() as s:
                db_book = _create(s)
                s.expunge(db_book)
                return db_book

    def get_book(self, book_id: str, session: Optional[Session] = None) -> Optional[Book]:
        """Get a book by ID."""

        def _get(s: Session) -> Optional[Book]:
            return s.get(Book, book_id)

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                db_book = _get(s)
                if db_book:
                    s.expunge(db_book)
                return db_book


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
