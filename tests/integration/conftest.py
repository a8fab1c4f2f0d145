"""Integration test fixtures.

Provides a fully wired AppState with in-memory SQLite and a real httpx
client (mock responses with respx), plus the environment for
subprocess-based MCP wire tests.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import aiosqlite
import httpx
import pytest

from docsfetcher.cache import Cache
from docsfetcher.config import Settings
from docsfetcher.crawler import Crawler
from docsfetcher.fetcher import Fetcher
from docsfetcher.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path


@pytest.fixture()
def subprocess_env(tmp_path: Path) -> dict[str, str]:
    """Baseline env dict for subprocess-based MCP integration tests.

    Overrides any local docsfetcher.yaml by forcing stdio transport and
    pointing the cache database to an isolated tmp directory.
    """
    env = os.environ.copy()
    env["DOCSFETCHER__SERVER__TRANSPORT"] = "stdio"
    env["DOCSFETCHER__CACHE__DB_PATH"] = str(tmp_path / "cache.db")
    env["DOCSFETCHER__LOGGING__LEVEL"] = "WARNING"
    return env


@pytest.fixture()
async def app_state() -> AsyncGenerator[AppState, None]:
    """Full AppState wired the way the server lifespan builds it."""
    async with aiosqlite.connect(":memory:") as db:
        cache = Cache(db)
        await cache.init_db()

        async with httpx.AsyncClient() as client:
            state = AppState(
                settings=Settings(),
                crawler=Crawler(cache, Fetcher(client)),
                http_client=client,
                cache=cache,
            )
            yield state
