"""Protocol interfaces for swappable components.

The crawler and AppState reference these protocols, not the concrete
implementations, so tests can pass a fake fetcher returning canned markup
or an in-memory cache.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from docsfetcher.models.markup import MarkupNode
    from docsfetcher.models.page import PageRecord


class CacheProtocol(Protocol):
    """Interface for the page cache backend."""

    async def get(self, url: str) -> PageRecord | None: ...

    async def put(self, url: str, record: PageRecord) -> None: ...


class FetcherProtocol(Protocol):
    """Interface for the HTTP documentation fetcher."""

    async def fetch(self, url: str) -> MarkupNode: ...
