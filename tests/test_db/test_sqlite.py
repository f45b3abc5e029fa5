"""Tests for SQLite database operations."""

from datetime import datetime, timezone

import pytest

from homearchive.db.schemas import BookCreate, CategoryCreate, PhysicalLocation
from homearchive.db.sqlite import Database


class TestCategoryOperations:
    """Tests for category CRUD."""

    def test_create_category(self, db: Database):
        """Test creating a category."""
        category = db.create_category(CategoryCreate(name="Poetry", description="Verse"))

        assert category.id is not None
        assert category.name == "Poetry"
        assert category.description == "Verse"

    def test_get_category_by_name(self, db: Database):
        """Test name lookup ignores case."""
        db.create_category(CategoryCreate(name="Science Fiction"))
        assert db.get_category_by_name("science fiction") is not None
        assert db.get_category_by_name("Mystery") is None

    def test_list_categories(self, db: Database):
        """Test categories are listed by name."""
        for name in ["Poetry", "Fiction", "History"]:
            db.create_category(CategoryCreate(name=name))
        assert [c.name for c in db.list_categories()] == ["Fiction", "History", "Poetry"]


class TestBookOperations:
    """Tests for book CRUD."""

    def test_create_book(self, db: Database):
        """Test creating a book."""
        book = db.create_book(
            BookCreate(
                title="Dune",
                author="Frank Herbert",
                isbn="  9780441172719 ",
                physical_location=PhysicalLocation.HOME_OFFICE,
                average_rating=4.3,
            )
        )

        assert book.id is not None
        assert book.isbn == "9780441172719"
        assert book.physical_location == "HOME_OFFICE"
        assert book.date_added is not None
        assert book.rating_count == 0

    def test_create_book_with_date_added(self, db: Database):
        """Test an explicit date_added is stored."""
        added = datetime(2024, 5, 1, tzinfo=timezone.utc)
        book = db.create_book(BookCreate(title="Emma", author="Jane Austen", date_added=added))
        assert book.date_added == added.isoformat()

    def test_get_book(self, db: Database):
        """Test fetching a book by id."""
        created = db.create_book(BookCreate(title="Emma", author="Jane Austen"))
        assert db.get_book(created.id).title == "Emma"
        assert db.get_book("missing") is None

    def test_rating_validation(self):
        """Test ratings above 5 are rejected by the schema."""
        with pytest.raises(ValueError):
            BookCreate(title="Bad", author="Rating", average_rating=5.5)


class TestPhysicalLocation:
    """Tests for the PhysicalLocation enum."""

    def test_from_name(self):
        """Test lookup by enum name."""
        assert PhysicalLocation.from_string("living_room") == PhysicalLocation.LIVING_ROOM

    def test_from_display_name(self):
        """Test lookup by display name."""
        assert PhysicalLocation.from_string("Home Office") == PhysicalLocation.HOME_OFFICE
        assert PhysicalLocation.from_string("Basement Bedroom") == PhysicalLocation.BASEMENT

    def test_unknown_is_other(self):
        """Test unknown and blank values map to OTHER."""
        assert PhysicalLocation.from_string("Attic") == PhysicalLocation.OTHER
        assert PhysicalLocation.from_string("") == PhysicalLocation.OTHER
        assert PhysicalLocation.from_string(None) == PhysicalLocation.OTHER

    def test_display_name(self):
        """Test display names."""
        assert PhysicalLocation.GUEST_BEDROOM.display_name == "Guest Bedroom"
