"""Personal library module."""

from .manager import LibraryManager

__all__ = ["LibraryManager"]
