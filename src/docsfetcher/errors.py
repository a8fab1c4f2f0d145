from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    NETWORK_FAILURE = "NETWORK_FAILURE"
    PAGE_NOT_FOUND = "PAGE_NOT_FOUND"
    CRAWL_EXHAUSTED = "CRAWL_EXHAUSTED"
    INVALID_INPUT = "INVALID_INPUT"


class DocsFetcherError(Exception):
    """Raised for all expected failure conditions of the pipeline.

    The crawler absorbs per-page fetch failures; only ``CRAWL_EXHAUSTED``
    and input validation errors reach server.py, which serialises them into
    the MCP error response.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable
        self.url = url

    def to_dict(self) -> dict:
        error: dict = {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "recoverable": self.recoverable,
        }
        if self.url is not None:
            error["url"] = self.url
        return {"error": error}
