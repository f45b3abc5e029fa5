"""Tests for LibraryManager."""

import pytest

from homearchive.db.sqlite import Database
from homearchive.library.manager import LibraryManager


@pytest.fixture
def library(db: Database) -> LibraryManager:
    """Create a LibraryManager with test database."""
    return LibraryManager(db)


class TestAddRemove:
    """Tests for adding and removing books."""

    def test_add_book(self, library, sample_books):
        """Test adding a book to a library."""
        entry = library.add_book("alice", sample_books["1984"])

        assert entry.user_id == "alice"
        assert entry.book_id == sample_books["1984"]
        assert library.is_owned("alice", sample_books["1984"])

    def test_add_duplicate(self, library, sample_books):
        """Test adding the same book twice fails."""
        library.add_book("alice", sample_books["1984"])
        with pytest.raises(ValueError, match="already"):
            library.add_book("alice", sample_books["1984"])

    def test_add_missing_book(self, library):
        """Test adding an unknown book fails."""
        with pytest.raises(ValueError, match="Book not found"):
            library.add_book("alice", "missing")

    def test_same_book_for_two_users(self, library, sample_books):
        """Test libraries are independent per user."""
        library.add_book("alice", sample_books["1984"])
        library.add_book("bob", sample_books["1984"])
        assert library.is_owned("bob", sample_books["1984"])

    def test_remove_book(self, library, sample_books):
        """Test removing a book."""
        library.add_book("alice", sample_books["1984"])

        assert library.remove_book("alice", sample_books["1984"])
        assert not library.is_owned("alice", sample_books["1984"])
        assert not library.remove_book("alice", sample_books["1984"])


class TestOwnership:
    """Tests for ownership lookups."""

    def test_get_books(self, library, sample_books):
        """Test listing a user's books by title."""
        library.add_book("alice", sample_books["The Great Gatsby"])
        library.add_book("alice", sample_books["1984"])

        assert [b.title for b in library.get_books("alice")] == ["1984", "The Great Gatsby"]
        assert library.get_books("bob") == []

    def test_owned_book_ids(self, library, sample_books):
        """Test all owned ids are returned."""
        library.add_book("alice", sample_books["The Great Gatsby"])
        library.add_book("alice", sample_books["1984"])

        assert library.owned_book_ids("alice") == {
            sample_books["The Great Gatsby"],
            sample_books["1984"],
        }

    def test_owned_book_ids_restricted(self, library, sample_books):
        """Test lookups can be restricted to given ids."""
        library.add_book("alice", sample_books["The Great Gatsby"])
        library.add_book("alice", sample_books["1984"])

        owned = library.owned_book_ids(
            "alice", [sample_books["1984"], sample_books["Pride and Prejudice"]]
        )
        assert owned == {sample_books["1984"]}

    def test_owned_book_ids_empty_restriction(self, library, sample_books):
        """Test an empty restriction owns nothing."""
        library.add_book("alice", sample_books["1984"])
        assert library.owned_book_ids("alice", []) == set()
