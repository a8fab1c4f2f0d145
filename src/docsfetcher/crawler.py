"""Bounded breadth-first documentation crawler.

Processes one URL at a time: cache lookup, fetch + extract on miss, cache
write, frontier update. Per-page failures are logged and skipped; the crawl
only fails as a whole when it produced no page at all.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import structlog

from docsfetcher.compiler import compile_document
from docsfetcher.errors import DocsFetcherError, ErrorCode
from docsfetcher.extractors import extract_page

if TYPE_CHECKING:
    from docsfetcher.models.page import PageRecord
    from docsfetcher.protocols import CacheProtocol, FetcherProtocol

log = structlog.get_logger()

DEFAULT_MAX_PAGES = 5


class CrawlStatus(StrEnum):
    SEEDED = "seeded"
    TRAVERSING = "traversing"
    EXHAUSTED = "exhausted"


@dataclass
class CrawlState:
    """Frontier bookkeeping for a single crawl invocation."""

    seed_url: str
    status: CrawlStatus = CrawlStatus.SEEDED
    frontier: deque[str] = field(default_factory=deque)
    visited: set[str] = field(default_factory=set)
    queued: set[str] = field(default_factory=set)
    pages: list[PageRecord] = field(default_factory=list)
    last_error: str | None = None

    def enqueue(self, url: str) -> bool:
        """Append ``url`` to the frontier unless it was seen before."""
        if url in self.visited or url in self.queued:
            return False
        self.frontier.append(url)
        self.queued.add(url)
        return True

    def pop(self) -> str:
        url = self.frontier.popleft()
        self.queued.discard(url)
        return url


class Crawler:
    """Orchestrates Cache, Fetcher and the extractors for one crawl at a time."""

    def __init__(self, cache: CacheProtocol, fetcher: FetcherProtocol) -> None:
        self._cache = cache
        self._fetcher = fetcher

    async def run(
        self,
        seed_url: str,
        subject: str,
        max_pages: int = DEFAULT_MAX_PAGES,
        skip_cache: bool = False,
    ) -> CrawlState:
        """Traverse from ``seed_url`` until the budget is hit or the frontier drains."""
        state = CrawlState(seed_url=seed_url)
        state.enqueue(seed_url)
        allowed_host = urlparse(seed_url).hostname
        crawl_log = log.bind(seed_url=seed_url, subject=subject, max_pages=max_pages)

        state.status = CrawlStatus.TRAVERSING
        while state.frontier and len(state.pages) < max_pages:
            url = state.pop()
            if url in state.visited:
                continue
            state.visited.add(url)

            try:
                page = await self.resolve_page(url, subject, allowed_host, skip_cache=skip_cache)
            except DocsFetcherError as exc:
                crawl_log.warning("page_resolve_failed", url=url, code=exc.code, error=exc.message)
                state.last_error = exc.message
                continue
            except Exception as exc:
                crawl_log.warning("page_resolve_unexpected_error", url=url, exc_info=True)
                state.last_error = str(exc) or type(exc).__name__
                continue

            state.pages.append(page)
            for link in page.links:
                state.enqueue(link)

        state.status = CrawlStatus.EXHAUSTED
        crawl_log.info(
            "crawl_complete",
            page_count=len(state.pages),
            visited_count=len(state.visited),
            frontier_remaining=len(state.frontier),
        )
        return state

    async def crawl(
        self,
        seed_url: str,
        subject: str,
        max_pages: int = DEFAULT_MAX_PAGES,
        skip_cache: bool = False,
    ) -> list[PageRecord]:
        """Return the crawled pages in order, or raise CRAWL_EXHAUSTED if none."""
        state = await self.run(seed_url, subject, max_pages=max_pages, skip_cache=skip_cache)
        if not state.pages:
            detail = f": {state.last_error}" if state.last_error else ""
            raise DocsFetcherError(
                code=ErrorCode.CRAWL_EXHAUSTED,
                message=f"Failed to fetch documentation from {seed_url}{detail}",
                suggestion=(
                    "Check the URL or package name, retry later, or fall back to "
                    "existing knowledge of the library."
                ),
                recoverable=True,
                url=seed_url,
            )
        return state.pages

    async def resolve_page(
        self,
        url: str,
        subject: str,
        allowed_host: str | None,
        *,
        skip_cache: bool = False,
    ) -> PageRecord:
        """Return a page from cache when fresh, otherwise fetch, extract and cache it."""
        if not skip_cache:
            cached = await self._cache.get(url)
            if cached is not None:
                log.info("cache_hit", url=url)
                return cached

        log.info("cache_miss_fetching", url=url, skip_cache=skip_cache)
        tree = await self._fetcher.fetch(url)
        page = extract_page(tree, url, subject, allowed_host)
        await self._cache.put(url, page)
        return page


@dataclass(frozen=True)
class CompiledDocs:
    content: str
    page_count: int


async def crawl_and_compile(
    crawler: Crawler,
    seed_url: str,
    subject: str,
    max_pages: int = DEFAULT_MAX_PAGES,
    skip_cache: bool = False,
) -> CompiledDocs:
    """Crawl from ``seed_url`` and compile the pages into one Markdown document."""
    pages = await crawler.crawl(seed_url, subject, max_pages=max_pages, skip_cache=skip_cache)
    return CompiledDocs(content=compile_document(pages, subject), page_count=len(pages))
