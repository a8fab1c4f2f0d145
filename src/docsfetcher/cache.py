"""SQLite page cache with TTL-on-read expiry.

All cache operations catch ``aiosqlite.Error`` internally and degrade
gracefully: read failures return ``None`` (treated as cache miss by the
crawler), write failures are logged and ignored (the fetched page is still
used). Infrastructure errors never cross the Cache class boundary.

Rows are keyed by the SHA-256 hex digest of the URL and hold the page record
as JSON. A row older than the TTL is simply not returned; reads never delete.
``cleanup_expired`` removes rows long past their TTL to bound file growth.
"""

from __future__ import annotations

import hashlib
from datetime import UTC, datetime, timedelta

import aiosqlite
import structlog
from pydantic import ValidationError

from docsfetcher.models.page import PageRecord

log = structlog.get_logger()

CLEANUP_GRACE = timedelta(days=7)

_CREATE_PAGE_TABLE = """
CREATE TABLE IF NOT EXISTS page_cache (
    url_key    TEXT PRIMARY KEY,
    url        TEXT NOT NULL,
    record     TEXT NOT NULL,
    written_at TEXT NOT NULL
)
"""

_CREATE_PAGE_INDEX = "CREATE INDEX IF NOT EXISTS idx_page_written ON page_cache(written_at)"

_CREATE_METADATA_TABLE = """
CREATE TABLE IF NOT EXISTS cache_metadata (
    key   TEXT PRIMARY KEY,
    value TEXT NOT NULL
)
"""


def cache_key(url: str) -> str:
    """Deterministic, filesystem-safe key for a URL."""
    return hashlib.sha256(url.encode()).hexdigest()


class Cache:
    """SQLite-backed page cache implementing CacheProtocol."""

    def __init__(self, db: aiosqlite.Connection, ttl_hours: int = 24) -> None:
        self._db = db
        self._ttl = timedelta(hours=ttl_hours)

    async def init_db(self) -> None:
        """Create tables and set WAL mode. Called once at startup."""
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute(_CREATE_PAGE_TABLE)
        await self._db.execute(_CREATE_PAGE_INDEX)
        await self._db.execute(_CREATE_METADATA_TABLE)
        await self._db.commit()

    async def get(self, url: str) -> PageRecord | None:
        """Return the cached record for ``url`` if present and fresh."""
        key = cache_key(url)
        try:
            cursor = await self._db.execute(
                "SELECT record, written_at FROM page_cache WHERE url_key = ?",
                (key,),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error:
            log.warning("cache_read_error", url=url, key=key, exc_info=True)
            return None

        if row is None:
            return None

        try:
            written_at = datetime.fromisoformat(row[1])
            record = PageRecord.model_validate_json(row[0])
        except (ValueError, ValidationError):
            log.warning("cache_record_corrupt", url=url, key=key, exc_info=True)
            return None
        if written_at.tzinfo is None:
            log.warning("cache_record_corrupt", url=url, key=key, reason="naive_timestamp")
            return None

        if datetime.now(UTC) - written_at >= self._ttl:
            log.debug("cache_stale", url=url, written_at=row[1])
            return None
        return record

    async def put(self, url: str, record: PageRecord) -> None:
        """Write or overwrite the record for ``url``. Non-fatal on failure."""
        key = cache_key(url)
        try:
            await self._db.execute(
                "INSERT OR REPLACE INTO page_cache (url_key, url, record, written_at) "
                "VALUES (?, ?, ?, ?)",
                (key, url, record.model_dump_json(), datetime.now(UTC).isoformat()),
            )
            await self._db.commit()
        except (aiosqlite.Error, ValueError):
            # ValueError covers pydantic serialisation failures on very deep trees
            log.warning("cache_write_error", url=url, key=key, exc_info=True)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def cleanup_if_due(self, interval_hours: int) -> None:
        """Run cleanup only if interval_hours have elapsed since the last run.

        Falls through to run cleanup if the metadata row is missing or
        unreadable. Non-fatal on failure.
        """
        try:
            cursor = await self._db.execute(
                "SELECT value FROM cache_metadata WHERE key = 'last_cleanup_at'"
            )
            row = await cursor.fetchone()
            if row is not None:
                last_run = datetime.fromisoformat(row[0])
                if datetime.now(UTC) - last_run < timedelta(hours=interval_hours):
                    log.debug("cache_cleanup_skipped", reason="not_due")
                    return
        except (aiosqlite.Error, ValueError):
            log.warning("cache_metadata_read_error", exc_info=True)

        await self.cleanup_expired()

        try:
            await self._db.execute(
                "INSERT OR REPLACE INTO cache_metadata (key, value) VALUES ('last_cleanup_at', ?)",
                (datetime.now(UTC).isoformat(),),
            )
            await self._db.commit()
        except aiosqlite.Error:
            log.warning("cache_metadata_write_error", exc_info=True)

    async def cleanup_expired(self) -> None:
        """Delete rows that went stale more than a week ago. Non-fatal on failure."""
        try:
            cutoff = (datetime.now(UTC) - self._ttl - CLEANUP_GRACE).isoformat()
            cursor = await self._db.execute(
                "DELETE FROM page_cache WHERE written_at < ?", (cutoff,)
            )
            page_deleted = cursor.rowcount
            await self._db.commit()
            log.info("cache_cleanup_complete", page_deleted=page_deleted)
        except aiosqlite.Error:
            log.warning("cache_cleanup_error", exc_info=True)
