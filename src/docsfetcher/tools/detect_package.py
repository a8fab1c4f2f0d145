"""Tool handler for detect_package.

Receives AppState, delegates to the references module, and returns a
structured dict. No MCP or FastMCP imports; server.py handles the MCP
wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from docsfetcher.errors import DocsFetcherError, ErrorCode
from docsfetcher.models.tools import DetectPackageInput, DetectPackageOutput
from docsfetcher.references import detect_package_reference

if TYPE_CHECKING:
    from docsfetcher.state import AppState


async def handle(text: str, state: AppState) -> dict:
    """Handle a detect_package tool call.

    Detection is pure and does not read ``state``; the parameter keeps the
    same ``handle(args..., state)`` shape as every other tool handler.
    """
    log = structlog.get_logger().bind(tool="detect_package")
    log.info("handler_called", text_length=len(text))

    # Validate input
    try:
        validated = DetectPackageInput(text=text)
    except ValueError as exc:
        raise DocsFetcherError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a non-empty snippet of code or text (max 10000 chars).",
            recoverable=False,
        ) from exc

    reference = detect_package_reference(validated.text)
    if reference is None:
        log.info("detect_complete", detected=False)
        return DetectPackageOutput(detected=False).model_dump(mode="json")

    log.info("detect_complete", detected=True, package=reference.package)
    output = DetectPackageOutput(
        detected=True,
        package=reference.package,
        language=reference.language,
        ecosystem=reference.ecosystem,
    )
    return output.model_dump(mode="json")
