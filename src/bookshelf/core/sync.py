"""Backfill covers across a whole collection, one book at a time."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable

import structlog

from .enricher import BookEnricher
from .models import BookRecord, EnrichmentOutcome, MissingCover, OutcomeStatus, SyncReport
from .urls import is_placeholder

log = structlog.get_logger()

DEFAULT_DELAY = 0.8  # seconds


def needs_persist(before: BookRecord, after: BookRecord) -> bool:
    return before.to_dict() != after.to_dict()


def _missing(book: object, reason: str) -> MissingCover:
    # getattr: a malformed record must still make it into the report
    return MissingCover(
        id=str(getattr(book, "id", "")),
        title=getattr(book, "title", "") or "",
        author=getattr(book, "author", None),
        section=getattr(book, "section", "") or "",
        reason=reason,
    )


class BatchCoverSync:
    """Run the enricher over many records without hammering the providers.

    Books are processed strictly in sequence. After every book that actually
    went to the network the sync sleeps for ``delay`` seconds; books that
    already had a cover (or have no title) do not wait.

    A failure on one record is logged and reported, never raised.
    """

    def __init__(
        self,
        enricher: BookEnricher,
        delay: float = DEFAULT_DELAY,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self.enricher = enricher
        self.delay = delay
        self._sleep = sleep

    async def sync_all(
        self,
        records: Iterable[BookRecord],
        on_progress: Callable[[int, int, EnrichmentOutcome | None], None] | None = None,
    ) -> SyncReport:
        """Enrich every record and collect what changed and what is still missing.

        on_progress is called with (index, total, outcome) after each record;
        outcome is None when the record failed.
        """
        records = list(records)
        report = SyncReport()
        total = len(records)

        for i, book in enumerate(records):
            outcome: EnrichmentOutcome | None = None
            try:
                had_cover = not is_placeholder(book.cover_url, self.enricher.placeholder_hosts)
                outcome = await self.enricher.enrich_with_outcome(book)
            except Exception as e:
                log.warning(
                    "cover_sync_failed",
                    id=getattr(book, "id", None),
                    title=getattr(book, "title", None),
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True,
                )
                report.missing.append(_missing(book, f"{type(e).__name__}: {e}"))
                went_to_network = self._would_search(book)
            else:
                if outcome.book.cover_url != book.cover_url:
                    report.updated.append(outcome.book)
                elif outcome.status is not OutcomeStatus.NOT_FOUND:
                    report.unchanged += 1
                if outcome.status is OutcomeStatus.NOT_FOUND and not had_cover:
                    report.missing.append(_missing(book, outcome.reason or "no cover found"))
                went_to_network = outcome.searched

            if on_progress:
                on_progress(i + 1, total, outcome)

            if went_to_network and self.delay > 0 and i + 1 < total:
                await self._sleep(self.delay)

        log.info(
            "cover_sync_done",
            total=total,
            updated=len(report.updated),
            missing=len(report.missing),
        )
        return report

    def _would_search(self, book: object) -> bool:
        try:
            return self.enricher.needs_cover(book)  # type: ignore[arg-type]
        except AttributeError:
            return False
