"""The library: catalogue, readers, lending, statistics and reservations."""

from __future__ import annotations

from dataclasses import dataclass

from thuvien.bst import BookTree
from thuvien.models import (
    MAX_BOOKS,
    MAX_BORROWED,
    MAX_READERS,
    Book,
    CapacityError,
    DuplicateError,
    NotFoundError,
    Reader,
    UnavailableError,
)
from thuvien.reservation import Priority, ReservationBook, ReservationEntry


@dataclass(frozen=True)
class Availability:
    """How many books are on the shelf and how many are lent out."""

    total: int
    available: int
    borrowed: int


class Library:
    """All books, readers and reservations of one library."""

    def __init__(self) -> None:
        self.books: list[Book] = []
        self.readers: list[Reader] = []
        self.reservations = ReservationBook()
        self._tree = BookTree()

    # Catalogue

    def find_book(self, book_id: str) -> Book:
        """The book with this id."""
        for book in self.books:
            if book.id == book_id:
                return book
        raise NotFoundError(f"no book with id {book_id}")

    def find_reader(self, reader_id: str) -> Reader:
        """The reader with this id."""
        for reader in self.readers:
            if reader.id == reader_id:
                return reader
        raise NotFoundError(f"no reader with id {reader_id}")

    def _has_book(self, book_id: str) -> bool:
        return any(book.id == book_id for book in self.books)

    def _has_reader(self, reader_id: str) -> bool:
        return any(reader.id == reader_id for reader in self.readers)

    def add_book(self, book: Book) -> Book:
        """Add a new book to the catalogue; it starts out available."""
        if len(self.books) >= MAX_BOOKS:
            raise CapacityError("the catalogue is full")
        if self._has_book(book.id):
            raise DuplicateError(f"book {book.id} already exists")
        book.available = True
        self.books.append(book)
        self._tree.insert(book)
        return book

    def remove_book(self, book_id: str) -> Book:
        """Remove a book that is not lent out and return it."""
        book = self.find_book(book_id)
        if not book.available:
            raise UnavailableError(f"book {book_id} is lent out and cannot be removed")
        if self._tree.search_by_id(book_id) is not None:
            self._tree.delete(book_id)
        self.books.remove(book)
        return book

    def search_books(self, keyword: str) -> list[Book]:
        """Books whose title, author or category contain keyword, in title order."""
        return self._tree.search_keyword(keyword)

    def books_by_title(self) -> list[Book]:
        """Every indexed book in title order."""
        return list(self._tree)

    def rebuild_index(self) -> None:
        """Rebuild the title index from the catalogue."""
        self._tree = BookTree(self.books)

    # Readers

    def add_reader(self, reader: Reader) -> Reader:
        """Register a new reader holding no books."""
        if len(self.readers) >= MAX_READERS:
            raise CapacityError("the reader list is full")
        if self._has_reader(reader.id):
            raise DuplicateError(f"reader {reader.id} already exists")
        reader.borrowed_book_ids = []
        self.readers.append(reader)
        return reader

    def remove_reader(self, reader_id: str) -> Reader:
        """Remove a reader who holds no books and return them."""
        reader = self.find_reader(reader_id)
        if reader.borrowed_count > 0:
            raise UnavailableError(f"reader {reader_id} still holds books")
        self.readers.remove(reader)
        return reader

    def search_readers(self, keyword: str) -> list[Reader]:
        """Readers whose id or name contains keyword (case-sensitive)."""
        return [r for r in self.readers if keyword in r.id or keyword in r.name]

    # Lending

    def borrow(self, reader_id: str, book_id: str) -> None:
        """Lend a book to a reader."""
        reader = self.find_reader(reader_id)
        if reader.borrowed_count >= MAX_BORROWED:
            raise CapacityError(f"reader {reader_id} holds the maximum number of books")
        book = self.find_book(book_id)
        if not book.available:
            raise UnavailableError(f"book {book_id} is already lent out")
        reader.borrowed_book_ids.append(book_id)
        book.available = False

    def return_book(self, reader_id: str, book_id: str) -> None:
        """Take a book back from the reader who holds it."""
        reader = self.find_reader(reader_id)
        book = self.find_book(book_id)
        try:
            reader.borrowed_book_ids.remove(book_id)
        except ValueError:
            raise NotFoundError(
                f"reader {reader_id} has not borrowed book {book_id}"
            ) from None
        book.available = True

    def borrowed_pairs(self) -> list[tuple[Reader, str]]:
        """Every (reader, book id) pair currently lent out, by reader."""
        return [
            (reader, book_id)
            for reader in self.readers
            for book_id in reader.borrowed_book_ids
        ]

    # Statistics

    def borrow_count(self, book_id: str) -> int:
        """How many times the book appears among readers' held books."""
        return sum(reader.borrowed_book_ids.count(book_id) for reader in self.readers)

    def most_borrowed_books(self) -> tuple[int, list[Book]]:
        """The highest borrow count and the books that reach it."""
        counts = [(book, self.borrow_count(book.id)) for book in self.books]
        best = max((count for _, count in counts), default=0)
        if best == 0:
            return 0, []
        return best, [book for book, count in counts if count == best]

    def top_borrowers(self) -> tuple[int, list[Reader]]:
        """The most books held by one reader and the readers who hold that many."""
        best = max((reader.borrowed_count for reader in self.readers), default=0)
        if best == 0:
            return 0, []
        return best, [r for r in self.readers if r.borrowed_count == best]

    def availability(self) -> Availability:
        """Counts of books on the shelf and lent out."""
        available = sum(1 for book in self.books if book.available)
        return Availability(len(self.books), available, len(self.books) - available)

    # Reservations

    def reserve(self, book_id: str, reader_id: str, priority: int) -> ReservationEntry:
        """Queue a reader for a lent-out book; invalid priorities become STUDENT."""
        book = self.find_book(book_id)
        if book.available:
            raise UnavailableError(f"book {book_id} is available and can be borrowed")
        self.find_reader(reader_id)
        try:
            level = Priority(priority)
        except ValueError:
            level = Priority.STUDENT
        return self.reservations.reserve(book_id, reader_id, level)

    def cancel_reservation(self, book_id: str, reader_id: str) -> ReservationEntry:
        """Cancel a reader's reservation for a book."""
        return self.reservations.cancel(book_id, reader_id)

    def next_reservation(self, book_id: str) -> ReservationEntry:
        """The reservation that will be served next for a book."""
        return self.reservations.next_in_line(book_id)