"""HTTP documentation fetcher.

All network I/O goes through a single Fetcher instance shared across crawls.
The Fetcher receives an httpx.AsyncClient via constructor injection; the
server lifespan owns the client lifecycle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog
from bs4.builder import ParserRejectedMarkup

from docsfetcher.errors import DocsFetcherError, ErrorCode
from docsfetcher.markup import parse_markup

if TYPE_CHECKING:
    from docsfetcher.config import FetcherSettings
    from docsfetcher.models.markup import MarkupNode

log = structlog.get_logger()

_TEXTUAL_CONTENT_MARKERS = ("text/", "html", "xml")


def build_http_client(settings: FetcherSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        follow_redirects=True,
        max_redirects=settings.max_redirects,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={
            "User-Agent": settings.user_agent,
            "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.5",
        },
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


def _is_textual(content_type: str) -> bool:
    # A missing header is given the benefit of the doubt
    if not content_type:
        return True
    content_type = content_type.lower()
    return any(marker in content_type for marker in _TEXTUAL_CONTENT_MARKERS)


class Fetcher:
    """Fetches a page and parses it into a MarkupNode tree. Never retries."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch(self, url: str) -> MarkupNode:
        """GET ``url`` and return its parsed markup.

        Raises DocsFetcherError on network errors, non-2xx responses,
        non-textual content and unparseable markup.
        """
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise DocsFetcherError(
                code=ErrorCode.NETWORK_FAILURE,
                message=f"Network error fetching {url}: {exc}",
                suggestion="The documentation source may be temporarily unavailable.",
                recoverable=True,
                url=url,
            ) from exc

        if not response.is_success:
            if response.status_code == 404:
                raise DocsFetcherError(
                    code=ErrorCode.PAGE_NOT_FOUND,
                    message=f"HTTP 404 fetching {url}",
                    suggestion="The requested documentation page does not exist at this URL.",
                    recoverable=False,
                    url=url,
                )
            raise DocsFetcherError(
                code=ErrorCode.NETWORK_FAILURE,
                message=f"HTTP {response.status_code} fetching {url}",
                suggestion="The documentation source may be temporarily unavailable.",
                recoverable=True,
                url=url,
            )

        content_type = response.headers.get("content-type", "")
        if not _is_textual(content_type):
            raise DocsFetcherError(
                code=ErrorCode.NETWORK_FAILURE,
                message=f"Unusable content type {content_type!r} fetching {url}",
                suggestion="Point the crawler at an HTML documentation page.",
                recoverable=False,
                url=url,
            )

        try:
            tree = parse_markup(response.text)
        except (ParserRejectedMarkup, RecursionError) as exc:
            raise DocsFetcherError(
                code=ErrorCode.NETWORK_FAILURE,
                message=f"Could not parse markup from {url}: {exc}",
                suggestion="The page returned malformed HTML.",
                recoverable=False,
                url=url,
            ) from exc

        log.info(
            "fetch_complete",
            url=url,
            status_code=response.status_code,
            content_length=len(response.text),
        )
        return tree
