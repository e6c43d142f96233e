"""Data models for the book collection."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum

SECTIONS = ("library", "recommended", "upcoming")


def is_valid_section(section: object) -> bool:
    return section in SECTIONS


@dataclass
class BookRecord:
    id: str
    title: str = ""
    author: str | None = None
    cover_url: str | None = None
    genres: list[str] = field(default_factory=list)
    spice: int = 0
    section: str = "library"
    notes: str | None = None
    release_date: str | None = None
    is_read: bool = False
    is_tbr: bool = False
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        """Outbound JSON shape used by the web layer and the store."""
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "coverUrl": self.cover_url,
            "genres": list(self.genres),
            "spice": self.spice,
            "section": self.section,
            "notes": self.notes,
            "releaseDate": self.release_date,
            "isRead": self.is_read,
            "isTbr": self.is_tbr,
            "createdAt": self.created_at,
        }


class OutcomeStatus(str, Enum):
    FOUND = "found"
    UNCHANGED = "unchanged"
    NOT_FOUND = "not_found"


@dataclass
class EnrichmentOutcome:
    status: OutcomeStatus
    book: BookRecord
    url: str | None = None
    reason: str | None = None
    # True when at least one provider was contacted
    searched: bool = False


@dataclass
class MissingCover:
    id: str
    title: str
    author: str | None
    section: str
    reason: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "section": self.section,
            "title": self.title,
            "author": self.author,
            "reason": self.reason,
        }


@dataclass
class SyncReport:
    updated: list[BookRecord] = field(default_factory=list)
    missing: list[MissingCover] = field(default_factory=list)
    unchanged: int = 0

    def to_dict(self) -> dict:
        return {
            "updated": [b.to_dict() for b in self.updated],
            "missing": [m.to_dict() for m in self.missing],
            "unchanged": self.unchanged,
        }
