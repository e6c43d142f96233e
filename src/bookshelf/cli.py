"""Command line entry point: seed the store, backfill covers, run the server."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Annotated

import httpx
import structlog
import typer

from .config import Settings
from .core.models import SECTIONS, EnrichmentOutcome
from .core.pipeline import build_sync
from .core.seed import read_data_dir
from .core.store import BookStore
from .core.sync import needs_persist
from .logging_setup import configure_logging

log = structlog.get_logger()

app = typer.Typer(name="bookshelf", help="Personal book collection tools.", no_args_is_help=True)

DbOption = Annotated[
    Path | None,
    typer.Option("--db", help="SQLite database path (defaults to BOOKSHELF_DB)."),
]


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj


@app.callback()
def main_callback(
    ctx: typer.Context,
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR.")
    ] = None,
) -> None:
    settings = Settings.from_env()
    configure_logging(log_level or settings.log_level)
    ctx.obj = settings


@app.command("import-json")
def import_json(
    ctx: typer.Context,
    data_dir: Annotated[
        Path, typer.Argument(exists=True, file_okay=False, help="Directory with <section>.json files.")
    ],
    replace: Annotated[
        bool,
        typer.Option("--replace/--append", help="Clear the store before importing."),
    ] = True,
    db: DbOption = None,
) -> None:
    """Load library.json, recommended.json and upcoming.json into the store."""
    settings = _settings(ctx)
    books = read_data_dir(data_dir)
    store = BookStore(db or settings.db_path)
    try:
        count = store.import_records(books, replace=replace)
    finally:
        store.close()
    typer.echo(f"Imported {count} books")


async def _run_sync(store: BookStore, settings: Settings, section: str | None, delay: float):
    books = store.list(section) if section else store.all()
    by_id = {b.id: b for b in books}

    def progress(i: int, total: int, outcome: EnrichmentOutcome | None) -> None:
        if outcome is None:
            status = "error"
        else:
            status = outcome.status.value
        typer.echo(f"[{i}/{total}] {status}: {books[i - 1].title}")

    async with httpx.AsyncClient() as client:
        sync = build_sync(client, settings)
        sync.delay = delay
        report = await sync.sync_all(books, on_progress=progress)

    saved = 0
    for book in report.updated:
        if needs_persist(by_id[book.id], book):
            store.update(book)
            saved += 1
    return report, saved


@app.command("sync-covers")
def sync_covers(
    ctx: typer.Context,
    section: Annotated[
        str | None, typer.Option("--section", "-s", help=f"One of {', '.join(SECTIONS)}.")
    ] = None,
    report_path: Annotated[
        Path, typer.Option("--report", "-r", help="Where to write the missing-covers report.")
    ] = Path("covers_missing.json"),
    delay: Annotated[
        float | None, typer.Option("--delay", help="Seconds to wait between provider lookups.")
    ] = None,
    db: DbOption = None,
) -> None:
    """Find covers for books that have none (or only a placeholder)."""
    settings = _settings(ctx)
    if section is not None and section not in SECTIONS:
        raise typer.BadParameter(f"must be one of {', '.join(SECTIONS)}", param_hint="--section")

    store = BookStore(db or settings.db_path)
    try:
        report, saved = asyncio.run(
            _run_sync(store, settings, section, settings.sync_delay if delay is None else delay)
        )
    finally:
        store.close()

    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(
        json.dumps([m.to_dict() for m in report.missing], indent=2), encoding="utf-8"
    )
    log.info("missing_report_written", path=str(report_path), missing=len(report.missing))
    typer.echo(f"Updated {saved} books, {len(report.missing)} still missing a cover")


@app.command("serve")
def serve() -> None:
    """Run the web server."""
    from .web.app import main

    main()


def main() -> None:
    app()
