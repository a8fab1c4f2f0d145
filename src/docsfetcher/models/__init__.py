from __future__ import annotations

from docsfetcher.models.markup import MarkupNode
from docsfetcher.models.page import ApiEntry, CodeExample, PageRecord
from docsfetcher.models.tools import (
    DetectPackageInput,
    DetectPackageOutput,
    FetchLibraryDocsInput,
    FetchLibraryDocsOutput,
)

__all__ = [
    # markup
    "MarkupNode",
    # pages
    "PageRecord",
    "CodeExample",
    "ApiEntry",
    # tools
    "FetchLibraryDocsInput",
    "FetchLibraryDocsOutput",
    "DetectPackageInput",
    "DetectPackageOutput",
]
