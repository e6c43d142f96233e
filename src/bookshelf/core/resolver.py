"""Find a cover URL for a title/author by walking the providers in a fixed order."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import structlog

from .providers import CoverProvider
from .titles import clean_title
from .urls import force_https

log = structlog.get_logger()


class CoverResolver:
    """Cover lookup waterfall.

    1. Open Library with the title as given
    2. Open Library with the cleaned title, if cleaning changed it
    3. Google Books, which tries its own title/author variants

    Open Library is cheaper and precise for well-formed pairs, so the fuzzier
    Google Books search runs last.
    """

    def __init__(self, open_library: CoverProvider, google_books: CoverProvider) -> None:
        self.open_library = open_library
        self.google_books = google_books

    def _attempts(
        self, title: str, author: str | None
    ) -> list[tuple[str, Callable[[], Awaitable[str | None]]]]:
        attempts: list[tuple[str, Callable[[], Awaitable[str | None]]]] = [
            ("open_library", lambda: self.open_library.search(title, author)),
        ]
        cleaned = clean_title(title)
        if cleaned and cleaned != title:
            attempts.append(
                ("open_library_cleaned", lambda: self.open_library.search(cleaned, author))
            )
        attempts.append(("google_books", lambda: self.google_books.search(title, author)))
        return attempts

    async def resolve(self, title: str, author: str | None) -> str | None:
        for source, attempt in self._attempts(title, author):
            url = await attempt()
            if url:
                url = force_https(url)
                log.debug("cover_resolved", title=title, author=author, source=source, url=url)
                return url
        return None
