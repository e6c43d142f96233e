"""Turn raw book titles into search-friendly query strings."""

from __future__ import annotations

import re

_QUOTES_SINGLE = re.compile(r"[‘’]")
_QUOTES_DOUBLE = re.compile(r"[“”]")
_DASHES = re.compile(r"[–—]")
_PARENS = re.compile(r"\([^)]*\)")
_SERIES_MARKER = re.compile(
    r"\b(?:Book|Bk|Volume|Vol|Part|Duet|Trilogy|Series)\b\.?\s*#?\d+\b",
    re.IGNORECASE,
)
_HASH_NUMBER = re.compile(r"#\d+\b")
_MULTI_SPACE = re.compile(r"\s{2,}")


def clean_title(raw: str | None) -> str:
    """Strip series annotations and volume markers from a title.

    "Ruin (Villain #2)" -> "Ruin", "Dark Vow Book 3" -> "Dark Vow".
    """
    if not raw:
        return ""
    t = str(raw)
    t = _QUOTES_SINGLE.sub("'", t)
    t = _QUOTES_DOUBLE.sub('"', t)
    t = _DASHES.sub("-", t)
    t = _PARENS.sub(" ", t)
    t = _SERIES_MARKER.sub(" ", t)
    t = _HASH_NUMBER.sub(" ", t)
    t = _MULTI_SPACE.sub(" ", t)
    return t.strip()


def first_two_words(s: str | None) -> str:
    if not s:
        return ""
    return " ".join(str(s).split()[:2])
