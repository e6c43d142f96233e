"""
Pytest configuration and fixtures for the bookshelf test suite.
"""
from collections.abc import Callable

import httpx
import pytest

from bookshelf.core.enricher import BookEnricher
from bookshelf.core.models import BookRecord
from bookshelf.core.resolver import CoverResolver
from bookshelf.core.store import BookStore


class FakeProvider:
    """Cover provider test double.

    ``results`` maps (title, author) to a URL, or to an exception to raise.
    Every call is recorded in ``calls``.
    """

    def __init__(self, name: str, results: dict | None = None):
        self.name = name
        self.results = results or {}
        self.calls: list[tuple[str, str | None]] = []

    async def search(self, title, author):
        self.calls.append((title, author))
        result = self.results.get((title, author))
        if isinstance(result, Exception):
            raise result
        return result


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def open_library():
    return FakeProvider("open_library")


@pytest.fixture
def google_books():
    return FakeProvider("google_books")


@pytest.fixture
def enricher(open_library, google_books):
    return BookEnricher(CoverResolver(open_library, google_books))


@pytest.fixture
def store():
    s = BookStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def make_book():
    def _make(**kwargs) -> BookRecord:
        kwargs.setdefault("id", "b1")
        kwargs.setdefault("title", "Ruin")
        kwargs.setdefault("author", "J. Doe")
        return BookRecord(**kwargs)

    return _make
