"""Application state container.

AppState is created once at server startup (inside the FastMCP lifespan
context manager) and injected into every tool handler via the MCP Context
object.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from docsfetcher.cache import Cache
    from docsfetcher.config import Settings
    from docsfetcher.crawler import Crawler


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every tool handler."""

    settings: Settings
    crawler: Crawler
    http_client: httpx.AsyncClient | None = None
    cache: Cache | None = None
