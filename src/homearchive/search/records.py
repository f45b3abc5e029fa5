"""Immutable book records consumed by the search engine."""

from dataclasses import dataclass
from typing import Optional

from ..db.models import Book


@dataclass(frozen=True)
class BookRecord:
    """Read-only snapshot of a book for the duration of one search."""

    id: str
    title: str
    author: str
    genre: Optional[str] = None
    category_id: Optional[int] = None
    isbn: Optional[str] = None
    publisher: Optional[str] = None
    publication_year: Optional[int] = None
    description: Optional[str] = None
    page_count: Optional[int] = None
    physical_location: Optional[str] = None
    average_rating: Optional[float] = None
    rating_count: int = 0
    date_added: Optional[str] = None

    @classmethod
    def from_model(cls, book: Book) -> "BookRecord":
        """Build a record from an ORM row."""
        return cls(
            id=book.id,
            title=book.title,
            author=book.author,
            genre=book.genre,
            category_id=book.category_id,
            isbn=book.isbn,
            publisher=book.publisher,
            publication_year=book.publication_year,
            description=book.description,
            page_count=book.page_count,
            physical_location=book.physical_location,
            average_rating=book.average_rating,
            rating_count=book.rating_count or 0,
            date_added=book.date_added,
        )
