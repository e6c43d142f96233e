"""Wire providers, resolver and enricher together from settings."""

from __future__ import annotations

import httpx

from ..config import Settings
from .enricher import BookEnricher
from .providers import GoogleBooksProvider, OpenLibraryProvider
from .resolver import CoverResolver
from .sync import BatchCoverSync


def build_enricher(client: httpx.AsyncClient, settings: Settings) -> BookEnricher:
    resolver = CoverResolver(
        open_library=OpenLibraryProvider(
            client,
            timeout=settings.provider_timeout,
            contact_email=settings.ol_contact_email,
        ),
        google_books=GoogleBooksProvider(
            client,
            timeout=settings.provider_timeout,
            api_key=settings.google_books_api_key,
        ),
    )
    return BookEnricher(resolver, placeholder_hosts=settings.placeholder_hosts)


def build_sync(client: httpx.AsyncClient, settings: Settings) -> BatchCoverSync:
    return BatchCoverSync(build_enricher(client, settings), delay=settings.sync_delay)
