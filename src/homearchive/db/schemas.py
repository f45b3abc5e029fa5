"""Pydantic schemas for data validation.

These schemas define the structure for book and category data written to the
local archive.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PhysicalLocation(str, Enum):
    """Rooms of the house where a book can be shelved."""

    MASTER_BEDROOM = "MASTER_BEDROOM"
    FIONA_BEDROOM = "FIONA_BEDROOM"
    GUEST_BEDROOM = "GUEST_BEDROOM"
    DINING_ROOM = "DINING_ROOM"
    LIVING_ROOM = "LIVING_ROOM"
    HOME_OFFICE = "HOME_OFFICE"
    KITCHEN = "KITCHEN"
    BASEMENT = "BASEMENT"
    OTHER = "OTHER"

    @property
    def display_name(self) -> str:
        """Human readable room name."""
        return _LOCATION_DISPLAY_NAMES[self]

    @classmethod
    def from_string(cls, value: Optional[str]) -> "PhysicalLocation":
        """Look up a location by enum name or display name.

        Matching is case-insensitive. Unknown or blank values map to OTHER.
        """
        if value is None or not value.strip():
            return cls.OTHER

        normalized = value.strip().upper()

        for location in cls:
            if location.name == normalized:
                return location

        for location in cls:
            if location.display_name.upper() == normalized:
                return location

        return cls.OTHER


_LOCATION_DISPLAY_NAMES = {
    PhysicalLocation.MASTER_BEDROOM: "Master Bedroom",
    PhysicalLocation.FIONA_BEDROOM: "Fiona's Bedroom",
    PhysicalLocation.GUEST_BEDROOM: "Guest Bedroom",
    PhysicalLocation.DINING_ROOM: "Dining Room",
    PhysicalLocation.LIVING_ROOM: "Living Room",
    PhysicalLocation.HOME_OFFICE: "Home Office",
    PhysicalLocation.KITCHEN: "Kitchen",
    PhysicalLocation.BASEMENT: "Basement Bedroom",
    PhysicalLocation.OTHER: "Other",
}


# ============================================================================
# Category Schemas
# ============================================================================


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


# ============================================================================
# Book Schemas
# ============================================================================


class BookCreate(BaseModel):
    """Schema for creating a new book."""

    # Core fields
    title: str = Field(..., min_length=1, max_length=255, description="Book title")
    author: str = Field(..., min_length=1, max_length=255, description="Primary author")
    genre: Optional[str] = Field(None, max_length=100)
    category_id: Optional[int] = None

    # Identifiers
    isbn: Optional[str] = Field(None, max_length=20)

    # Metadata
    publisher: Optional[str] = Field(None, max_length=255)
    publication_year: Optional[int] = Field(None, ge=0, le=9999)
    description: Optional[str] = None
    page_count: Optional[int] = Field(None, ge=0)

    # Shelving
    physical_location: Optional[PhysicalLocation] = None

    # Ratings
    average_rating: Optional[float] = Field(None, ge=0, le=5)
    rating_count: int = Field(default=0, ge=0)

    date_added: Optional[datetime] = None

    @field_validator("isbn")
    @classmethod
    def strip_isbn(cls, v: Optional[str]) -> Optional[str]:
        """Trim surrounding whitespace from ISBNs."""
        if v is None:
            return v
        v = v.strip()
        return v or None
