"""Binary search tree of books ordered by case-insensitive title."""

from __future__ import annotations

import string
from collections.abc import Iterable, Iterator
from itertools import islice

from thuvien.models import MAX_BOOKS, Book, DuplicateError, NotFoundError

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _fold(text: str) -> str:
    # Only ASCII letters are folded; other characters compare as they are.
    return text.translate(_ASCII_LOWER)


def compare_title(title1: str, title2: str) -> int:
    """Compare two titles ignoring ASCII case; return -1, 0 or 1."""
    a = _fold(title1).encode("utf-8")
    b = _fold(title2).encode("utf-8")
    return (a > b) - (a < b)


def contains_keyword(text: str, keyword: str) -> bool:
    """Tell whether keyword occurs in text, ignoring ASCII case."""
    return _fold(keyword) in _fold(text)


class _Node:
    __slots__ = ("book", "left", "right")

    def __init__(self, book: Book) -> None:
        self.book = book
        self.left: _Node | None = None
        self.right: _Node | None = None


class BookTree:
    """Books kept in title order; equal titles go to the right."""

    def __init__(self, books: Iterable[Book] = ()) -> None:
        self._root: _Node | None = None
        self._size = 0
        for book in books:
            self.insert(book)

    def insert(self, book: Book) -> None:
        """Add a book; the same title with the same id is rejected."""
        new = _Node(book)
        if self._root is None:
            self._root = new
            self._size += 1
            return
        node = self._root
        while True:
            cmp = compare_title(book.title, node.book.title)
            if cmp == 0 and book.id == node.book.id:
                raise DuplicateError(f"book {book.id} is already in the tree")
            if cmp < 0:
                if node.left is None:
                    node.left = new
                    break
                node = node.left
            else:
                if node.right is None:
                    node.right = new
                    break
                node = node.right
        self._size += 1

    def search_by_title(self, title: str) -> Book | None:
        """Return a book whose title matches exactly (ignoring case), or None."""
        node = self._root
        while node is not None:
            cmp = compare_title(title, node.book.title)
            if cmp == 0:
                return node.book
            node = node.left if cmp < 0 else node.right
        return None

    def _find(self, book_id: str) -> tuple[_Node, _Node | None] | None:
        stack: list[tuple[_Node, _Node | None]] = []
        if self._root is not None:
            stack.append((self._root, None))
        while stack:
            node, parent = stack.pop()
            if node.book.id == book_id:
                return node, parent
            if node.right is not None:
                stack.append((node.right, node))
            if node.left is not None:
                stack.append((node.left, node))
        return None

    def search_by_id(self, book_id: str) -> Book | None:
        """Return the book with this id, or None."""
        found = self._find(book_id)
        return found[0].book if found else None

    def delete(self, book_id: str) -> Book:
        """Remove the book with this id and return it."""
        found = self._find(book_id)
        if found is None:
            raise NotFoundError(f"no book with id {book_id} in the tree")
        node, parent = found
        removed = node.book
        if node.left is not None and node.right is not None:
            succ_parent, succ = node, node.right
            while succ.left is not None:
                succ_parent, succ = succ, succ.left
            node.book = succ.book
            node, parent = succ, succ_parent
        child = node.left if node.left is not None else node.right
        if parent is None:
            self._root = child
        elif parent.left is node:
            parent.left = child
        else:
            parent.right = child
        self._size -= 1
        return removed

    def search_keyword(self, keyword: str) -> list[Book]:
        """Books whose title, author or category contain keyword, in title order."""
        matches = (
            book
            for book in self
            if contains_keyword(book.title, keyword)
            or contains_keyword(book.author, keyword)
            or contains_keyword(book.category, keyword)
        )
        return list(islice(matches, MAX_BOOKS))

    def clear(self) -> None:
        """Remove every book."""
        self._root = None
        self._size = 0

    def __iter__(self) -> Iterator[Book]:
        stack: list[_Node] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.book
            node = node.right

    def __len__(self) -> int:
        return self._size