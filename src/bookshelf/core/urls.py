"""Cover URL helpers shared by the providers, the enricher and ingestion."""

from __future__ import annotations

import re

DEFAULT_PLACEHOLDER_HOSTS = ("placehold.co",)

_HTTP_SCHEME = re.compile(r"^http:", re.IGNORECASE)


def force_https(url: str) -> str:
    return _HTTP_SCHEME.sub("https:", url, count=1)


def normalize_cover_url(url: str | None) -> str | None:
    """Force https and drop the Google Books page-curl effect.

    Returns None for empty input.
    """
    if not url:
        return None
    return force_https(url.strip()).replace("&edge=curl", "") or None


def is_placeholder(url: str | None, hosts: tuple[str, ...] = DEFAULT_PLACEHOLDER_HOSTS) -> bool:
    """True if a cover URL still needs resolving.

    Empty values, known placeholder-image hosts and inline data URIs all count.
    """
    if not url or not isinstance(url, str) or not url.strip():
        return True
    if url.strip().lower().startswith("data:"):
        return True
    lowered = url.lower()
    return any(host.lower() in lowered for host in hosts if host)
