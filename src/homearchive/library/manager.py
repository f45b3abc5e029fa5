"""Manager for personal library operations.

A personal library is the set of books a user owns, keyed by a plain user id.
The manager also answers ownership lookups for search results.
"""

from typing import Collection, Optional

from sqlalchemy import select

from ..db.models import Book, PersonalLibraryEntry
from ..db.sqlite import Database, get_db


class LibraryManager:
    """Manages which books each user owns."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize library manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def add_book(self, user_id: str, book_id: str) -> PersonalLibraryEntry:
        """Add a book to a user's library.

        Args:
            user_id: User ID
            book_id: Book ID

        Returns:
            Created library entry

        Raises:
            ValueError: If the book does not exist or is already owned.
        """
        with self.db.get_session() as session:
            if session.get(Book, book_id) is None:
                raise ValueError(f"Book not found: {book_id}")

            existing = session.execute(
                select(PersonalLibraryEntry).where(
                    PersonalLibraryEntry.user_id == user_id,
                    PersonalLibraryEntry.book_id == book_id,
                )
            ).scalar_one_or_none()

            if existing:
                raise ValueError("Book is already in this library")

            entry = PersonalLibraryEntry(user_id=user_id, book_id=book_id)
            session.add(entry)
            session.commit()
            session.refresh(entry)
            session.expunge(entry)
            return entry

    def remove_book(self, user_id: str, book_id: str) -> bool:
        """Remove a book from a user's library.

        Returns:
            True if removed
        """
        with self.db.get_session() as session:
            entry = session.execute(
                select(PersonalLibraryEntry).where(
                    PersonalLibraryEntry.user_id == user_id,
                    PersonalLibraryEntry.book_id == book_id,
                )
            ).scalar_one_or_none()

            if not entry:
                return False

            session.delete(entry)
            session.commit()
            return True

    def get_books(self, user_id: str) -> list[Book]:
        """Get the books a user owns, ordered by title."""
        with self.db.get_session() as session:
            stmt = (
                select(Book)
                .join(PersonalLibraryEntry, PersonalLibraryEntry.book_id == Book.id)
                .where(PersonalLibraryEntry.user_id == user_id)
                .order_by(Book.title)
            )
            books = list(session.execute(stmt).scalars().all())
            for book in books:
                session.expunge(book)
            return books

    def owned_book_ids(
        self, user_id: str, book_ids: Optional[Collection[str]] = None
    ) -> set[str]:
        """Ids of the books a user owns.

        Args:
            user_id: User ID
            book_ids: Only consider these books; None means all

        Returns:
            Set of owned book ids
        """
        if book_ids is not None and not book_ids:
            return set()

        stmt = select(PersonalLibraryEntry.book_id).where(
            PersonalLibraryEntry.user_id == user_id
        )
        if book_ids is not None:
            stmt = stmt.where(PersonalLibraryEntry.book_id.in_(list(book_ids)))

        with self.db.get_session() as session:
            return set(session.execute(stmt).scalars().all())

    def is_owned(self, user_id: str, book_id: str) -> bool:
        """Check whether a user owns a book."""
        return book_id in self.owned_book_ids(user_id, [book_id])
