"""Shared test fixtures for the docsfetcher test suite."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import aiosqlite
import pytest

from docsfetcher.cache import Cache
from docsfetcher.errors import DocsFetcherError, ErrorCode
from docsfetcher.extractors import extract_page
from docsfetcher.markup import parse_markup
from docsfetcher.models.page import PageRecord

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from docsfetcher.models.markup import MarkupNode


def html_page(title: str, body: str) -> str:
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>"


class FakeFetcher:
    """In-memory FetcherProtocol implementation serving canned HTML."""

    def __init__(self, pages: dict[str, str]) -> None:
        self.pages = pages
        self.calls: list[str] = []

    async def fetch(self, url: str) -> MarkupNode:
        self.calls.append(url)
        if url not in self.pages:
            raise DocsFetcherError(
                code=ErrorCode.NETWORK_FAILURE,
                message=f"Network error fetching {url}: connection refused",
                suggestion="The documentation source may be temporarily unavailable.",
                recoverable=True,
                url=url,
            )
        return parse_markup(self.pages[url])


@pytest.fixture()
async def cache() -> AsyncGenerator[Cache, None]:
    """Cache backed by an in-memory SQLite database."""
    async with aiosqlite.connect(":memory:") as db:
        cache = Cache(db, ttl_hours=24)
        await cache.init_db()
        yield cache


@pytest.fixture()
def make_page() -> Callable[..., PageRecord]:
    """Build a PageRecord from an HTML body, the way the crawler would."""

    def _make(url: str, title: str = "Page", body: str = "", subject: str = "") -> PageRecord:
        page = extract_page(parse_markup(html_page(title, body)), url, subject)
        # Fixed timestamp keeps records comparable across calls
        return page.model_copy(update={"fetched_at": datetime(2026, 1, 1, tzinfo=UTC)})

    return _make


@pytest.fixture()
def fake_fetcher() -> Callable[[dict[str, str]], FakeFetcher]:
    """Factory for FakeFetcher instances serving the given url → HTML map."""
    return FakeFetcher
