"""Cover image lookups against external book metadata services."""

from __future__ import annotations

from typing import Protocol

import httpx
import structlog

from .titles import clean_title, first_two_words
from .urls import normalize_cover_url

log = structlog.get_logger()

# Failures that mean "this provider has nothing for us" rather than a bug.
# InvalidURL is raised for oversized query components, outside HTTPError.
PROVIDER_ERRORS = (
    httpx.HTTPError,
    httpx.InvalidURL,
    ValueError,
    KeyError,
    TypeError,
    AttributeError,
    IndexError,
)

OPEN_LIBRARY_SEARCH_URL = "https://openlibrary.org/search.json"
OPEN_LIBRARY_COVER_ID_URL = "https://covers.openlibrary.org/b/id/{cover_id}-L.jpg"
OPEN_LIBRARY_COVER_ISBN_URL = "https://covers.openlibrary.org/b/isbn/{isbn}-L.jpg"
GOOGLE_BOOKS_URL = "https://www.googleapis.com/books/v1/volumes"

# Largest first
GOOGLE_IMAGE_SIZES = ("extraLarge", "large", "medium", "thumbnail", "smallThumbnail")

_USER_AGENT = "Bookshelf/0.1.0"


def user_agent(contact_email: str = "") -> str:
    # Open Library gives identified clients a higher rate limit
    return f"{_USER_AGENT} ({contact_email})" if contact_email else _USER_AGENT


class CoverProvider(Protocol):
    name: str

    async def search(self, title: str, author: str | None) -> str | None: ...


class OpenLibraryProvider:
    """One search.json query, best cover from the first document."""

    name = "open_library"

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: float = 10.0,
        contact_email: str = "",
    ) -> None:
        self.client = client
        self.timeout = timeout
        self.headers = {"User-Agent": user_agent(contact_email)}

    async def search(self, title: str, author: str | None) -> str | None:
        if not title:
            return None
        params = {"title": title}
        if author:
            params["author"] = author
        params["limit"] = "1"

        try:
            resp = await self.client.get(
                OPEN_LIBRARY_SEARCH_URL,
                params=params,
                headers=self.headers,
                timeout=self.timeout,
                follow_redirects=True,
            )
            resp.raise_for_status()
            docs = resp.json().get("docs") or []
            if not docs:
                log.debug("openlibrary_no_match", title=title, author=author)
                return None
            url = self._cover_from_doc(docs[0])
        except PROVIDER_ERRORS as e:
            log.debug("openlibrary_error", title=title, author=author, error=str(e))
            return None

        if url:
            log.debug("openlibrary_hit", title=title, author=author, url=url)
        return url

    @staticmethod
    def _cover_from_doc(doc: dict) -> str | None:
        cover_id = doc.get("cover_i")
        if cover_id:
            return OPEN_LIBRARY_COVER_ID_URL.format(cover_id=cover_id)
        isbns = doc.get("isbn")
        if isinstance(isbns, list) and isbns and isbns[0]:
            return OPEN_LIBRARY_COVER_ISBN_URL.format(isbn=isbns[0])
        return None


def google_books_variants(title: str, author: str | None) -> list[tuple[str, str]]:
    """(title, author) query pairs to try, broadest last, duplicates removed."""
    author = author or ""
    cleaned = clean_title(title)
    candidates = [(title, author)]
    if cleaned and cleaned != title:
        candidates.append((cleaned, author))
    if cleaned:
        candidates.append((cleaned, ""))
    if title:
        candidates.append((title, ""))
    two = first_two_words(cleaned or title)
    if two and author:
        candidates.append((two, author))

    variants: list[tuple[str, str]] = []
    for pair in candidates:
        if pair[0] and pair not in variants:
            variants.append(pair)
    return variants


class GoogleBooksProvider:
    """Google Books volume search, walking title/author variants until one has art."""

    name = "google_books"

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: float = 10.0,
        api_key: str = "",
        max_results: int = 5,
    ) -> None:
        self.client = client
        self.timeout = timeout
        self.api_key = api_key
        self.max_results = max_results

    async def search(self, title: str, author: str | None) -> str | None:
        for t, a in google_books_variants(title, author):
            url = await self._search_variant(t, a)
            if url:
                log.debug("google_books_hit", title=t, author=a, url=url)
                return url
        log.debug("google_books_no_match", title=title, author=author)
        return None

    async def _search_variant(self, title: str, author: str) -> str | None:
        parts = [f"intitle:{title}"]
        if author:
            parts.append(f"inauthor:{author}")
        params = {
            "q": " ".join(parts),
            "printType": "books",
            "maxResults": str(self.max_results),
        }
        if self.api_key:
            params["key"] = self.api_key

        try:
            resp = await self.client.get(GOOGLE_BOOKS_URL, params=params, timeout=self.timeout)
            resp.raise_for_status()
            items = resp.json().get("items") or []
            for item in items:
                url = self._best_image(item)
                if url:
                    return url
        except PROVIDER_ERRORS as e:
            log.debug("google_books_error", title=title, author=author, error=str(e))
        return None

    @staticmethod
    def _best_image(item: dict) -> str | None:
        links = (item.get("volumeInfo") or {}).get("imageLinks") or {}
        for size in GOOGLE_IMAGE_SIZES:
            if links.get(size):
                return normalize_cover_url(links[size])
        return None
