"""SQLAlchemy ORM models for local SQLite database.

Tables:
- categories: Book categories used for filtering
- books: Main book records
- personal_library: Books owned by a user, keyed by plain user id
- search_history: Queries run against the archive
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class Category(Base):
    """Category model - a named grouping used as a structural filter."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[str] = mapped_column(String(26), default=utc_now)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"


class Book(Base):
    """Book model - one physical book in the archive."""

    __tablename__ = "books"

    # Primary key
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    # Core fields
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    genre: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    category_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), index=True
    )

    # Identifiers
    isbn: Mapped[Optional[str]] = mapped_column(String(20), index=True)

    # Metadata
    publisher: Mapped[Optional[str]] = mapped_column(String(255))
    publication_year: Mapped[Optional[int]] = mapped_column(Integer, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    page_count: Mapped[Optional[int]] = mapped_column(Integer)

    # Shelving
    physical_location: Mapped[Optional[str]] = mapped_column(String(20), index=True)

    # Ratings
    average_rating: Mapped[Optional[float]] = mapped_column(Float)
    rating_count: Mapped[int] = mapped_column(Integer, default=0)

    # Dates
    date_added: Mapped[str] = mapped_column(String(26), default=utc_now, index=True)

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(26), default=utc_now)
    updated_at: Mapped[str] = mapped_column(String(26), default=utc_now, onupdate=utc_now)

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}', author='{self.author}')>"


class PersonalLibraryEntry(Base):
    """A book owned by a user."""

    __tablename__ = "personal_library"
    __table_args__ = (UniqueConstraint("user_id", "book_id", name="uq_library_user_book"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    book_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )
    added_at: Mapped[str] = mapped_column(String(26), default=utc_now)

    def __repr__(self) -> str:
        return f"<PersonalLibraryEntry(user_id={self.user_id}, book_id={self.book_id})>"


class SearchHistory(Base):
    """A search that was run, kept for suggestions and analytics."""

    __tablename__ = "search_history"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    query: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    result_count: Mapped[int] = mapped_column(Integer, default=0)
    searched_at: Mapped[str] = mapped_column(String(26), default=utc_now, index=True)

    def __repr__(self) -> str:
        return f"<SearchHistory(query='{self.query}', results={self.result_count})>"
