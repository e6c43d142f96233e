"""Fill in missing cover art on a single book record."""

from __future__ import annotations

from dataclasses import replace

import structlog

from .models import BookRecord, EnrichmentOutcome, OutcomeStatus
from .resolver import CoverResolver
from .urls import DEFAULT_PLACEHOLDER_HOSTS, force_https, is_placeholder

log = structlog.get_logger()


class BookEnricher:
    """Decide whether a book needs a cover lookup and merge the result.

    An existing usable cover is never replaced; it only gets its scheme
    forced to https. Records are not mutated, a new value is returned.
    """

    def __init__(
        self,
        resolver: CoverResolver,
        placeholder_hosts: tuple[str, ...] = DEFAULT_PLACEHOLDER_HOSTS,
    ) -> None:
        self.resolver = resolver
        self.placeholder_hosts = placeholder_hosts

    def needs_cover(self, book: BookRecord) -> bool:
        return bool(book.title) and is_placeholder(book.cover_url, self.placeholder_hosts)

    async def enrich(self, book: BookRecord) -> BookRecord:
        outcome = await self.enrich_with_outcome(book)
        return outcome.book

    async def enrich_with_outcome(self, book: BookRecord) -> EnrichmentOutcome:
        if not book.title:
            return EnrichmentOutcome(OutcomeStatus.NOT_FOUND, book, reason="missing title")

        existing = book.cover_url
        if not is_placeholder(existing, self.placeholder_hosts):
            url = force_https(existing.strip())
            if url != existing:
                book = replace(book, cover_url=url)
            return EnrichmentOutcome(OutcomeStatus.UNCHANGED, book, url=url)

        log.info("cover_search", id=book.id, title=book.title, author=book.author)
        found = await self.resolver.resolve(book.title, book.author)
        if not found:
            log.info("cover_not_found", id=book.id, title=book.title)
            return EnrichmentOutcome(
                OutcomeStatus.NOT_FOUND, book, reason="no cover found", searched=True
            )

        url = force_https(found)
        log.info("cover_found", id=book.id, title=book.title, url=url)
        return EnrichmentOutcome(
            OutcomeStatus.FOUND, replace(book, cover_url=url), url=url, searched=True
        )
