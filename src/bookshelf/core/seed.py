"""Load books from the per-section JSON data files."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from .models import SECTIONS, BookRecord
from .normalize import normalize_book

log = structlog.get_logger()


def section_file(data_dir: Path, section: str) -> Path:
    return data_dir / f"{section}.json"


def read_section_file(path: Path, section: str) -> list[BookRecord]:
    """Read one data file: either a JSON list, or an object with a ``books`` list."""
    data = json.loads(path.read_text(encoding="utf-8"))
    items = data.get("books") if isinstance(data, dict) else data
    if not isinstance(items, list):
        log.warning("seed_file_skipped", path=str(path), reason="not a list")
        return []
    books = [normalize_book(item, section) for item in items if isinstance(item, dict)]
    log.info("seed_file_read", path=str(path), section=section, books=len(books))
    return books


def read_data_dir(data_dir: Path) -> list[BookRecord]:
    books: list[BookRecord] = []
    for section in SECTIONS:
        path = section_file(data_dir, section)
        if not path.exists():
            log.debug("seed_file_missing", path=str(path))
            continue
        books.extend(read_section_file(path, section))
    return books
