"""Core records and errors shared by the library system."""

from __future__ import annotations

from dataclasses import dataclass, field

MAX_BOOKS = 1000
MAX_READERS = 500
MAX_BORROWED = 10


class LibraryError(Exception):
    """Base class for every error raised by the library system."""


class NotFoundError(LibraryError, LookupError):
    """A book, reader or reservation could not be found."""


class DuplicateError(LibraryError):
    """An item with the same identifier already exists."""


class CapacityError(LibraryError):
    """A collection has reached its configured limit."""


class UnavailableError(LibraryError):
    """The requested operation conflicts with the current lending state."""


@dataclass
class Book:
    """A book in the catalogue."""

    id: str
    title: str
    author: str
    category: str
    price: int
    available: bool = True


@dataclass
class Reader:
    """A registered reader and the books they currently hold."""

    id: str
    name: str
    department: str
    borrowed_book_ids: list[str] = field(default_factory=list)

    @property
    def borrowed_count(self) -> int:
        """Number of books the reader currently holds."""
        return len(self.borrowed_book_ids)