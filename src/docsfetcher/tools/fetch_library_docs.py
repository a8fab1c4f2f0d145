"""Tool handler for fetch_library_docs.

Receives AppState, turns the library argument into a seed URL, runs the
crawl and compiles the result. No MCP or FastMCP imports; server.py
handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from docsfetcher.crawler import crawl_and_compile
from docsfetcher.errors import DocsFetcherError, ErrorCode
from docsfetcher.models.tools import FetchLibraryDocsInput, FetchLibraryDocsOutput
from docsfetcher.resolver import is_url, resolve_seed_url, subject_from_url

if TYPE_CHECKING:
    from docsfetcher.state import AppState


async def handle(
    library: str,
    state: AppState,
    *,
    ecosystem: str | None = None,
    max_pages: int | None = None,
    skip_cache: bool = False,
) -> dict:
    """Handle a fetch_library_docs tool call."""
    log = structlog.get_logger().bind(tool="fetch_library_docs", library=library)
    log.info("handler_called", ecosystem=ecosystem, max_pages=max_pages, skip_cache=skip_cache)

    # Validate input
    try:
        validated = FetchLibraryDocsInput(
            library=library.strip(),
            ecosystem=ecosystem,
            max_pages=max_pages if max_pages is not None else state.settings.crawler.max_pages,
            skip_cache=skip_cache,
        )
    except ValueError as exc:
        raise DocsFetcherError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion=(
                "Provide a package name or documentation URL (max 500 chars) "
                "and max_pages between 1 and 50."
            ),
            recoverable=False,
        ) from exc

    if is_url(validated.library):
        seed_url = validated.library
        subject = subject_from_url(seed_url)
    else:
        seed_url = resolve_seed_url(validated.library, validated.ecosystem)
        subject = validated.library

    log.info("seed_resolved", seed_url=seed_url, subject=subject)

    compiled = await crawl_and_compile(
        state.crawler,
        seed_url,
        subject,
        max_pages=validated.max_pages,
        skip_cache=validated.skip_cache,
    )

    output = FetchLibraryDocsOutput(
        library=subject,
        seed_url=seed_url,
        page_count=compiled.page_count,
        content=compiled.content,
    )
    return output.model_dump(mode="json")
