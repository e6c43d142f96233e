"""Normalize loosely-shaped book input into canonical BookRecord values.

Books arrive from several places (the web form, JSON seed files, older
exports) and spell the same field in different ways. ``normalize_book`` is
the only place those spellings are understood; everything downstream works
with ``BookRecord`` fields.
"""

from __future__ import annotations

import math
import re
import uuid
from collections.abc import Mapping

from ..exceptions import InvalidSectionError
from .models import BookRecord, is_valid_section
from .urls import normalize_cover_url

SPICE_MIN = 0
SPICE_MAX = 5

# Checked in order; the first word found wins ("Medium-High" -> 5).
_SPICE_WORDS = (
    (re.compile(r"\bhigh\b"), 5),
    (re.compile(r"\bmedium\b"), 3),
    (re.compile(r"\blow\b"), 1),
)
_DIGITS = re.compile(r"\d+")

_SPICE_KEYS = (
    "spice",
    "spice_level",
    "spiceLevel",
    "spiceRating",
    "spice_rating",
    "spice level",
    "Spice Level",
    "Spice",
)
_GENRE_KEYS = ("genres", "genre", "genre/theme", "genre/category", "tags")
_COVER_KEYS = ("coverUrl", "cover_image_url", "cover_url")


def _clamp(n: int) -> int:
    return max(SPICE_MIN, min(SPICE_MAX, n))


def parse_spice(raw: object) -> int:
    """Parse a spice level (number, word, or labelled string) into 0-5."""
    if raw is None:
        return 0
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        if not math.isfinite(raw):
            return 0
        # round half up, 2.5 -> 3
        return _clamp(math.floor(raw + 0.5))

    value = str(raw).strip().lower()
    if not value:
        return 0
    for pattern, level in _SPICE_WORDS:
        if pattern.search(value):
            return level
    m = _DIGITS.search(value)
    if m:
        return _clamp(int(m.group(0)))
    return 0


def _genre_name(item: object) -> str:
    if isinstance(item, str):
        return item.strip()
    if isinstance(item, Mapping):
        name = item.get("name")
    else:
        name = getattr(item, "name", None)
    return str(name).strip() if name else ""


def parse_genres(raw: object) -> list[str]:
    """Parse genres from a comma string, a list of strings or a list of tagged objects."""
    if not raw:
        return []
    if isinstance(raw, (list, tuple)):
        return [name for name in (_genre_name(item) for item in raw) if name]
    if isinstance(raw, str):
        return [s.strip() for s in raw.split(",") if s.strip()]
    return []


def dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


def _first_present(raw: Mapping, keys: tuple[str, ...]) -> object:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _first_truthy(raw: Mapping, keys: tuple[str, ...]) -> object:
    for key in keys:
        value = raw.get(key)
        if value:
            return value
    return None


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


_ALIAS_GROUPS = (
    _SPICE_KEYS,
    _GENRE_KEYS,
    _COVER_KEYS,
    ("title", "name"),
    ("author", "authors"),
    ("releaseDate", "release_date"),
)


def merge_changes(existing: BookRecord, changes: Mapping) -> dict:
    """Overlay raw edits on a stored record.

    Any alias present in ``changes`` replaces the whole alias group, so an edit
    sent as ``spice_level`` is not shadowed by the stored ``spice``.
    """
    merged = existing.to_dict()
    for group in _ALIAS_GROUPS:
        if any(key in changes for key in group):
            for key in group:
                merged.pop(key, None)
    merged.update(changes)
    return merged


def normalize_book(
    raw: Mapping,
    section: str | None = None,
    *,
    book_id: str | None = None,
) -> BookRecord:
    """Build a canonical BookRecord from any of the accepted input shapes.

    Raises:
        InvalidSectionError: if the resolved section is not a known section.
    """
    section = section or raw.get("section") or "library"
    if not is_valid_section(section):
        raise InvalidSectionError(section)

    title = _optional_str(raw.get("title") or raw.get("name")) or ""
    author = raw.get("author")
    if not author:
        authors = raw.get("authors")
        if isinstance(authors, (list, tuple)) and authors:
            author = authors[0]

    book = BookRecord(
        id=book_id or _optional_str(raw.get("id")) or uuid.uuid4().hex[:12],
        title=title,
        author=_optional_str(author),
        cover_url=normalize_cover_url(_optional_str(_first_truthy(raw, _COVER_KEYS))),
        genres=dedupe(parse_genres(_first_truthy(raw, _GENRE_KEYS))),
        spice=parse_spice(_first_present(raw, _SPICE_KEYS)),
        section=section,
        notes=_optional_str(raw.get("notes")),
        release_date=_optional_str(_first_present(raw, ("releaseDate", "release_date"))),
        is_read=bool(raw.get("isRead")),
        is_tbr=bool(raw.get("isTbr")),
    )
    created_at = raw.get("createdAt")
    if isinstance(created_at, (int, float)) and not isinstance(created_at, bool):
        book.created_at = float(created_at)
    return book
