"""Exceptions raised by the bookshelf package."""

from __future__ import annotations


class BookshelfError(Exception):
    """Base class for bookshelf errors."""


class InvalidSectionError(BookshelfError, ValueError):
    """Raised when a section name is not one of the fixed collection buckets."""

    def __init__(self, section: object) -> None:
        super().__init__(f"Invalid section: {section!r}")
        self.section = section


class BookNotFoundError(BookshelfError, KeyError):
    """Raised when a book id is unknown, or not in the expected section."""

    def __init__(self, book_id: str, section: str | None = None) -> None:
        where = f" in section {section!r}" if section else ""
        super().__init__(f"Book {book_id!r} not found{where}")
        self.book_id = book_id
        self.section = section

    def __str__(self) -> str:
        # KeyError quotes its message otherwise
        return str(self.args[0])
