"""Pytest configuration and shared fixtures.

This module provides fixtures for testing the homearchive application,
including in-memory databases, seeded books and record factories.
"""

import os
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from homearchive.config import reset_config
from homearchive.db.schemas import BookCreate, CategoryCreate, PhysicalLocation
from homearchive.db.sqlite import Database, reset_db
from homearchive.search.records import BookRecord


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def db() -> Generator[Database, None, None]:
    """Create an in-memory database for testing."""
    reset_db()
    reset_config()

    database = Database(":memory:")
    database.create_tables()
    yield database

    reset_db()
    reset_config()


@pytest.fixture(scope="function")
def temp_db_path() -> Generator[Path, None, None]:
    """Point HOMEARCHIVE_DB_PATH at a temporary database file."""
    reset_db()
    reset_config()

    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    os.environ["HOMEARCHIVE_DB_PATH"] = str(db_path)

    yield db_path

    # Cleanup
    reset_db()
    reset_config()
    if "HOMEARCHIVE_DB_PATH" in os.environ:
        del os.environ["HOMEARCHIVE_DB_PATH"]
    if db_path.exists():
        db_path.unlink()


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def categories(db: Database) -> dict[str, int]:
    """Create the Fiction and Science Fiction categories."""
    fiction = db.create_category(CategoryCreate(name="Fiction"))
    scifi = db.create_category(CategoryCreate(name="Science Fiction"))
    return {"fiction": fiction.id, "scifi": scifi.id}


@pytest.fixture
def sample_books(db: Database, categories: dict[str, int]) -> dict[str, str]:
    """Seed five classic books, returning title -> id."""
    books_data = [
        BookCreate(
            title="The Great Gatsby",
            author="F. Scott Fitzgerald",
            genre="Classic Fiction",
            category_id=categories["fiction"],
            isbn="9780743273565",
            publisher="Scribner",
            publication_year=1925,
            description="A story of decadence and excess in the Jazz Age.",
            page_count=180,
            physical_location=PhysicalLocation.LIVING_ROOM,
            average_rating=4.2,
            rating_count=12,
        ),
        BookCreate(
            title="1984",
            author="George Orwell",
            genre="Dystopian",
            category_id=categories["scifi"],
            isbn="9780451524935",
            publisher="Signet Classics",
            publication_year=1949,
            description="A dystopian social science fiction novel about surveillance.",
            page_count=328,
            physical_location=PhysicalLocation.HOME_OFFICE,
            average_rating=4.6,
            rating_count=30,
        ),
        BookCreate(
            title="To Kill a Mockingbird",
            author="Harper Lee",
            genre="Classic Fiction",
            category_id=categories["fiction"],
            isbn="9780061120084",
            publisher="Harper Perennial",
            publication_year=1960,
            description="A novel about racial injustice in the American South.",
            page_count=336,
            physical_location=PhysicalLocation.LIVING_ROOM,
            average_rating=4.8,
            rating_count=25,
        ),
        BookCreate(
            title="Pride and Prejudice",
            author="Jane Austen",
            genre="Romance",
            category_id=categories["fiction"],
            isbn="9780141439518",
            publisher="Penguin Classics",
            publication_year=1813,
            description="A romantic novel of manners.",
            page_count=432,
            physical_location=PhysicalLocation.MASTER_BEDROOM,
            average_rating=4.3,
            rating_count=18,
        ),
        BookCreate(
            title="The Catcher in the Rye",
            author="J.D. Salinger",
            genre="Coming-of-age",
            category_id=categories["fiction"],
            isbn="9780316769488",
            publisher="Little, Brown",
            publication_year=1951,
            description="A story about teenage angst and alienation.",
            page_count=277,
            physical_location=PhysicalLocation.GUEST_BEDROOM,
            average_rating=3.8,
            rating_count=9,
        ),
    ]
    return {book.title: book.id for book in (db.create_book(data) for data in books_data)}


# ============================================================================
# Record Factories
# ============================================================================


@pytest.fixture
def make_record() -> Callable[..., BookRecord]:
    """Build BookRecords with sensible defaults."""
    counter = {"n": 0}

    def _make(title: str = "Untitled", author: str = "Anonymous", **kwargs) -> BookRecord:
        counter["n"] += 1
        kwargs.setdefault("id", f"book-{counter['n']:03d}")
        return BookRecord(title=title, author=author, **kwargs)

    return _make
