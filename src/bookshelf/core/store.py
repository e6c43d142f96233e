"""SQLite-backed storage for book records."""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterable
from pathlib import Path

import structlog

from ..exceptions import BookNotFoundError, InvalidSectionError
from .models import BookRecord, is_valid_section
from .normalize import normalize_book

log = structlog.get_logger()


class BookStore:
    """Keep book records in a local SQLite database, one JSON document per row."""

    def __init__(self, db_path: Path | str = ":memory:") -> None:
        if db_path != ":memory:":
            db_path = Path(db_path)
            db_path.parent.mkdir(parents=True, exist_ok=True)
        self.db_path = db_path
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.execute(
            """CREATE TABLE IF NOT EXISTS books (
                id TEXT PRIMARY KEY,
                section TEXT NOT NULL,
                data TEXT NOT NULL,
                created_at REAL
            )"""
        )
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    @staticmethod
    def _load(data: str) -> BookRecord:
        # stored documents are already canonical; this just rebuilds the dataclass
        return normalize_book(json.loads(data))

    def list(self, section: str) -> list[BookRecord]:
        """Books in a section, newest first."""
        if not is_valid_section(section):
            raise InvalidSectionError(section)
        rows = self._conn.execute(
            "SELECT data FROM books WHERE section = ? ORDER BY created_at DESC",
            (section,),
        ).fetchall()
        return [self._load(row[0]) for row in rows]

    def all(self) -> list[BookRecord]:
        rows = self._conn.execute(
            "SELECT data FROM books ORDER BY section, created_at DESC"
        ).fetchall()
        return [self._load(row[0]) for row in rows]

    def get(self, book_id: str) -> BookRecord | None:
        row = self._conn.execute("SELECT data FROM books WHERE id = ?", (book_id,)).fetchone()
        if row is None:
            return None
        return self._load(row[0])

    def _write(self, book: BookRecord) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO books (id, section, data, created_at) VALUES (?, ?, ?, ?)",
            (book.id, book.section, json.dumps(book.to_dict()), book.created_at),
        )

    def add(self, book: BookRecord) -> BookRecord:
        self._write(book)
        self._conn.commit()
        log.debug("book_stored", id=book.id, section=book.section)
        return book

    def update(self, book: BookRecord) -> BookRecord:
        if self.get(book.id) is None:
            raise BookNotFoundError(book.id)
        self._write(book)
        self._conn.commit()
        log.debug("book_updated", id=book.id, section=book.section)
        return book

    def delete(self, book_id: str) -> bool:
        cur = self._conn.execute("DELETE FROM books WHERE id = ?", (book_id,))
        self._conn.commit()
        return cur.rowcount > 0

    def move(self, book_id: str, source: str, destination: str) -> BookRecord:
        """Move a book between sections.

        Raises:
            InvalidSectionError: if either section is unknown.
            BookNotFoundError: if the book is missing or not in ``source``.
        """
        for section in (source, destination):
            if not is_valid_section(section):
                raise InvalidSectionError(section)
        book = self.get(book_id)
        if book is None or book.section != source:
            raise BookNotFoundError(book_id, source)
        book.section = destination
        self._write(book)
        self._conn.commit()
        log.info("book_moved", id=book_id, source=source, destination=destination)
        return book

    def import_records(self, records: Iterable[BookRecord], replace: bool = True) -> int:
        """Bulk load records.

        With ``replace`` the existing collection is cleared first, in the same
        transaction, so seed files without ids can be re-imported safely.
        """
        count = 0
        try:
            if replace:
                self._conn.execute("DELETE FROM books")
            for book in records:
                self._write(book)
                count += 1
        except sqlite3.Error:
            self._conn.rollback()
            raise
        self._conn.commit()
        log.info("books_imported", count=count, replace=replace)
        return count
