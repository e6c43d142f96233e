"""FastAPI web application for Bookshelf."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from datetime import datetime, timezone

import httpx
import structlog
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from ..config import Settings
from ..core.enricher import BookEnricher
from ..core.models import is_valid_section
from ..core.normalize import merge_changes, normalize_book
from ..core.pipeline import build_enricher
from ..core.store import BookStore
from ..exceptions import BookNotFoundError

log = structlog.get_logger()

settings = Settings.from_env()

_store: BookStore | None = None


def get_store() -> BookStore:
    global _store
    if _store is None:
        _store = BookStore(settings.db_path)
    return _store


async def get_enricher() -> AsyncIterator[BookEnricher]:
    async with httpx.AsyncClient() as client:
        yield build_enricher(client, settings)


def _invalid_section() -> JSONResponse:
    return JSONResponse({"message": "Invalid section"}, status_code=400)


async def _read_json(request: Request) -> object:
    """Request body as JSON, or None when it does not parse."""
    try:
        return await request.json()
    except ValueError:
        return None


app = FastAPI(title="Bookshelf", docs_url=None, redoc_url=None)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": "0.1.0",
        "environment": settings.env,
    }


# Registered before the section routes so "move-book" is not taken for a section name.
@app.post("/api/move-book")
async def move_book(request: Request, store: BookStore = Depends(get_store)):
    body = await _read_json(request)
    if not isinstance(body, dict):
        return JSONResponse({"message": "Invalid payload"}, status_code=400)
    book_id = body.get("bookId")
    source = body.get("sourceSection")
    destination = body.get("destinationSection")
    if not book_id or not is_valid_section(source) or not is_valid_section(destination):
        return JSONResponse({"message": "Invalid payload"}, status_code=400)

    try:
        store.move(str(book_id), source, destination)
    except BookNotFoundError:
        return JSONResponse({"message": "Book not found in source section"}, status_code=404)
    return {"message": "Book moved successfully"}


@app.get("/api/{section}")
async def list_books(section: str, store: BookStore = Depends(get_store)):
    if not is_valid_section(section):
        return _invalid_section()
    return [book.to_dict() for book in store.list(section)]


@app.post("/api/{section}", status_code=201)
async def create_book(
    section: str,
    request: Request,
    store: BookStore = Depends(get_store),
    enricher: BookEnricher = Depends(get_enricher),
):
    if not is_valid_section(section):
        return _invalid_section()
    body = await _read_json(request)
    if not isinstance(body, dict):
        return JSONResponse({"message": "Invalid payload"}, status_code=400)

    book = normalize_book(body, section)
    book = await enricher.enrich(book)
    store.add(book)
    log.info("book_created", id=book.id, section=section, has_cover=bool(book.cover_url))
    return JSONResponse(book.to_dict(), status_code=201)


@app.put("/api/{section}/{book_id}")
async def update_book(
    section: str,
    book_id: str,
    request: Request,
    store: BookStore = Depends(get_store),
    enricher: BookEnricher = Depends(get_enricher),
):
    if not is_valid_section(section):
        return _invalid_section()
    existing = store.get(book_id)
    if existing is None or existing.section != section:
        return JSONResponse({"message": "Book not found"}, status_code=404)
    body = await _read_json(request)
    if not isinstance(body, dict):
        return JSONResponse({"message": "Invalid payload"}, status_code=400)

    book = normalize_book(merge_changes(existing, body), section, book_id=book_id)
    book = await enricher.enrich(book)
    store.update(book)
    return book.to_dict()


@app.delete("/api/{section}/{book_id}")
async def delete_book(section: str, book_id: str, store: BookStore = Depends(get_store)):
    if not is_valid_section(section):
        return _invalid_section()
    existing = store.get(book_id)
    if existing is None or existing.section != section:
        return JSONResponse({"message": "Book not found"}, status_code=404)
    store.delete(book_id)
    return Response(status_code=204)


def main():
    port = int(os.environ.get("PORT", str(settings.port)))
    is_dev = settings.env == "dev"
    uvicorn.run(
        "bookshelf.web.app:app",
        host="0.0.0.0",
        port=port,
        reload=is_dev,
    )
