"""MCP server entrypoint.

Wires configuration, logging and shared resources into a FastMCP instance,
registers the two tools and two prompts, and starts stdio or streamable
HTTP. Tool logic lives in ``docsfetcher.tools``.
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import AsyncExitStack, asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

import aiosqlite
import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

import docsfetcher.tools.detect_package as t_detect
import docsfetcher.tools.fetch_library_docs as t_fetch_docs
from docsfetcher import __version__, prompts
from docsfetcher.cache import Cache
from docsfetcher.config import Settings
from docsfetcher.crawler import Crawler
from docsfetcher.errors import DocsFetcherError
from docsfetcher.fetcher import Fetcher, build_http_client
from docsfetcher.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable

log = structlog.get_logger()


def configure_logging(settings: Settings) -> None:
    """Route structlog output to stderr at the configured level and format."""
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if settings.logging.format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[settings.logging.level]
        ),
        context_class=dict,
        # stdout carries the JSON-RPC stream in stdio mode
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


async def _open_cache(settings: Settings, stack: AsyncExitStack) -> Cache:
    db_path = Path(settings.cache.db_path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    db = await stack.enter_async_context(aiosqlite.connect(str(db_path)))

    cache = Cache(db, ttl_hours=settings.cache.ttl_hours)
    await cache.init_db()
    await cache.cleanup_if_due(settings.cache.cleanup_interval_hours)
    log.info("cache_ready", db_path=str(db_path), ttl_hours=settings.cache.ttl_hours)
    return cache


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncGenerator[AppState, None]:
    """Own the HTTP client and the cache connection for the server's lifetime."""
    settings = Settings()
    configure_logging(settings)
    log.info("server_starting", version=__version__, transport=settings.server.transport)

    async with AsyncExitStack() as stack:
        http_client = await stack.enter_async_context(build_http_client(settings.fetcher))
        cache = await _open_cache(settings, stack)
        yield AppState(
            settings=settings,
            crawler=Crawler(cache, Fetcher(http_client)),
            http_client=http_client,
            cache=cache,
        )
        log.info("server_stopping")


mcp = FastMCP("docsfetcher", lifespan=lifespan)
# Report the package version in the initialize handshake instead of the SDK's
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _serialise_tool_error(error: DocsFetcherError) -> CallToolResult:
    """Wrap a DocsFetcherError in an MCP tool result with isError set."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(error.to_dict()))],
        isError=True,
    )


async def _run_tool(tool: str, call: Awaitable[dict[str, Any]]) -> object:
    try:
        return await call
    except DocsFetcherError as exc:
        log.warning(
            "tool_error",
            tool=tool,
            code=exc.code,
            message=exc.message,
            recoverable=exc.recoverable,
        )
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool=tool, exc_info=True)
        raise


@mcp.tool()
async def fetch_library_docs(
    library: str,
    ctx: Context,
    ecosystem: str | None = None,
    max_pages: int | None = None,
    skip_cache: bool = False,
) -> object:
    """Crawl a library's documentation and return it as one Markdown document.

    ``library`` is either a documentation URL or a package name. Package names
    are resolved through ``ecosystem`` (npm, pypi, crates, go, ...; defaults
    to npm). Crawls at most ``max_pages`` same-site pages.
    """
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool(
        "fetch_library_docs",
        t_fetch_docs.handle(
            library,
            state,
            ecosystem=ecosystem,
            max_pages=max_pages,
            skip_cache=skip_cache,
        ),
    )


@mcp.tool()
async def detect_package(text: str, ctx: Context) -> object:
    """Detect the package referenced by an import, require or use statement."""
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool("detect_package", t_detect.handle(text, state))


@mcp.prompt(name="summarize-library-docs")
def summarize_library_docs(
    library_name: str, documentation: str = "", error_status: str = ""
) -> str:
    """Summarise fetched library documentation."""
    return prompts.summarize_library_docs(library_name, documentation, error_status)


@mcp.prompt(name="explain-dependency-error")
def explain_dependency_error(
    package_name: str, documentation: str = "", error_status: str = ""
) -> str:
    """Explain a dependency error using the package documentation."""
    return prompts.explain_dependency_error(package_name, documentation, error_status)


def main() -> None:
    settings = Settings()
    if settings.server.transport == "stdio":
        mcp.run()
        return

    configure_logging(settings)
    mcp.settings.host = settings.server.host
    mcp.settings.port = settings.server.port
    mcp.run(transport="streamable-http")


if __name__ == "__main__":
    main()
