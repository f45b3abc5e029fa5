"""Database module for local SQLite storage."""

from .models import Book, Category, PersonalLibraryEntry, SearchHistory
from .schemas import BookCreate, CategoryCreate, PhysicalLocation
from .sqlite import Database, get_db

__all__ = [
    "Book",
    "Category",
    "PersonalLibraryEntry",
    "SearchHistory",
    "BookCreate",
    "CategoryCreate",
    "PhysicalLocation",
    "Database",
    "get_db",
]
