from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from docsfetcher.models.markup import MarkupNode


class CodeExample(BaseModel):
    """A code block found on a documentation page."""

    code: str
    language: str = ""  # Lowercased tag, empty when nothing could be inferred
    description: str = ""


class ApiEntry(BaseModel):
    """A heading followed by a signature and/or a description paragraph."""

    name: str
    signature: str = ""
    description: str = ""


class PageRecord(BaseModel):
    """Everything extracted from one fetched documentation page."""

    url: str
    title: str
    content: MarkupNode | None = None  # Main content subtree, None for an empty page
    links: list[str] = []  # Deduplicated, in discovery order
    code_examples: list[CodeExample] = []
    api_entries: list[ApiEntry] = []
    fetched_at: datetime
