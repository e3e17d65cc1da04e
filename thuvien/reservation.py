"""Per-book priority queues of reservations."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum

from thuvien.models import DuplicateError, NotFoundError, CapacityError

MAX_BOOKS_WITH_RESERVATIONS = 1000


class Priority(IntEnum):
    """Reservation priority; a lower value is served first."""

    STAFF = 1
    STUDENT = 2

    @property
    def label(self) -> str:
        return "Giảng viên/Cán bộ" if self is Priority.STAFF else "Sinh viên"


@dataclass(frozen=True)
class ReservationEntry:
    """One reader waiting for one book."""

    book_id: str
    reader_id: str
    priority: Priority


class ReservationQueue:
    """Readers waiting for a book, by priority and then arrival."""

    def __init__(self, book_id: str) -> None:
        self.book_id = book_id
        self._entries: list[ReservationEntry] = []

    def add(self, reader_id: str, priority: int) -> ReservationEntry:
        """Queue a reader; a reader may appear only once."""
        level = Priority(priority)
        if any(entry.reader_id == reader_id for entry in self._entries):
            raise DuplicateError(
                f"reader {reader_id} already reserved book {self.book_id}"
            )
        entry = ReservationEntry(self.book_id, reader_id, level)
        index = bisect_right(self._entries, level, key=lambda e: e.priority)
        self._entries.insert(index, entry)
        return entry

    def remove(self, reader_id: str) -> ReservationEntry:
        """Drop the reader's reservation and return it."""
        for index, entry in enumerate(self._entries):
            if entry.reader_id == reader_id:
                return self._entries.pop(index)
        raise NotFoundError(
            f"reader {reader_id} has no reservation for book {self.book_id}"
        )

    def peek(self) -> ReservationEntry:
        """The reservation that will be served next."""
        if not self._entries:
            raise NotFoundError(f"queue for book {self.book_id} is empty")
        return self._entries[0]

    def __iter__(self) -> Iterator[ReservationEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


class ReservationBook:
    """All reservation queues, one per book, in creation order."""

    def __init__(self) -> None:
        self._queues: dict[str, ReservationQueue] = {}

    def reserve(self, book_id: str, reader_id: str, priority: int) -> ReservationEntry:
        """Add a reservation, creating the book's queue if needed."""
        queue = self._queues.get(book_id)
        if queue is None:
            if len(self._queues) >= MAX_BOOKS_WITH_RESERVATIONS:
                raise CapacityError("too many books with reservations")
            queue = ReservationQueue(book_id)
            entry = queue.add(reader_id, priority)
            self._queues[book_id] = queue
            return entry
        return queue.add(reader_id, priority)

    def cancel(self, book_id: str, reader_id: str) -> ReservationEntry:
        """Remove a reservation; an emptied queue is dropped."""
        queue = self.queue(book_id)
        entry = queue.remove(reader_id)
        if not queue:
            del self._queues[book_id]
        return entry

    def next_in_line(self, book_id: str) -> ReservationEntry:
        """The reservation to be served next for a book."""
        return self.queue(book_id).peek()

    def queue(self, book_id: str) -> ReservationQueue:
        """The queue for a book."""
        try:
            return self._queues[book_id]
        except KeyError:
            raise NotFoundError(f"no reservations for book {book_id}") from None

    def total(self) -> int:
        """Number of reservations across all books."""
        return sum(len(queue) for queue in self._queues.values())

    def clear(self) -> None:
        """Drop every reservation."""
        self._queues.clear()

    def __iter__(self) -> Iterator[ReservationQueue]:
        return iter(list(self._queues.values()))

    def __len__(self) -> int:
        return len(self._queues)