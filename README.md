# thuvien

A console library management system. It keeps a catalogue of books, a list of
readers, a record of who has borrowed what, simple statistics and per-book
reservation queues ordered by priority. The console menus are in Vietnamese.

## Installing

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Running

    thuvien

The console reads choices from standard input. It ends when you choose `0` in
the main menu or when input runs out. The main menu has five sections:

1. Book catalogue: add a book, list all books, search by keyword, delete by
   id, list in title order and rebuild the title index. A book that is on loan
   cannot be deleted.
2. Borrowing and returning: lend a book, take it back, and list the books on
   loan. Each reader may hold at most 10 books at once.
3. Readers: add, list, search by id or name, delete. A reader who still holds
   books cannot be deleted.
4. Statistics: the most borrowed books, the readers who hold the most books,
   and the number of books on the shelf and on loan.
5. Reservations: a book that is on loan can be reserved. Staff and lecturers
   (priority 1) go ahead of students (priority 2). An invalid priority is
   replaced by 2. Readers with the same priority keep the order in which they
   reserved. A reader can reserve a given book only once.

Enter `0` to leave a section. Leaving the reservations section drops every
reservation.

## Using it from Python

```python
from thuvien.library import Library
from thuvien.models import Book, Reader
from thuvien.reservation import Priority

lib = Library()
lib.add_book(Book(id="S001", title="Dế Mèn phiêu lưu ký", author="Tô Hoài",
                  category="Thiếu nhi", price=50000))
lib.add_reader(Reader(id="BD001", name="Nguyễn Văn A", department="CNTT"))
lib.add_reader(Reader(id="BD002", name="Trần Thị B", department="Toán"))

lib.borrow("BD001", "S001")
lib.reserve("S001", "BD002", Priority.STUDENT)

print(lib.next_reservation("S001"))
print(lib.availability())
print([book.title for book in lib.search_books("dế mèn")])
```

The modules:

- `thuvien.models`: the `Book` and `Reader` records, the limits (`MAX_BOOKS`
  1000, `MAX_READERS` 500, `MAX_BORROWED` 10) and the exceptions.
- `thuvien.bst`: `BookTree`, a binary search tree of books ordered by title,
  with `compare_title` and `contains_keyword`.
- `thuvien.reservation`: `Priority`, `ReservationEntry`, `ReservationQueue`
  (one book's waiting list) and `ReservationBook` (the queues of all books).
- `thuvien.library`: `Library`, which ties the catalogue, readers, lending,
  statistics (`most_borrowed_books`, `top_borrowers`, `availability`) and
  reservations together.
- `thuvien.cli`: `Console`, the menu-driven front end, and `main`, which the
  `thuvien` command runs. `Console` takes a `Library` and any text streams for
  input and output.

An operation that cannot go ahead raises one of the exceptions in
`thuvien.models`: `NotFoundError`, `DuplicateError`, `CapacityError` or
`UnavailableError`. All of them derive from `LibraryError`.

`Library.books_by_title()` returns books in title order from the tree, and
`Library.search_books()` matches the keyword against title, author and
category. Both ignore case for the letters A to Z only; other letters, such as
Vietnamese ones with diacritics, must match exactly. `Library.search_readers()`
matches the id or name and is case-sensitive.

## What it does not do

Everything is kept in memory. Nothing is saved to or loaded from a file or a
database, so all books, readers, loans and reservations are lost when the
program ends. There are no due dates, fines or borrowing history: the
"most borrowed" statistic counts only the books readers hold right now.