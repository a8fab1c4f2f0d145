"""Compile crawled pages into a single Markdown document.

Output layout:
  title, overview metadata, table of contents, one section per page in crawl
  order (body, code examples, API reference), then a fixed block of guidance
  for whoever summarises the document.

Everything except the generation timestamp is a pure function of the input.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from docsfetcher.extractors import infer_language
from docsfetcher.markup import clean_text, heading_level, is_heading, walk_with_siblings

if TYPE_CHECKING:
    from collections.abc import Sequence

    from docsfetcher.models.markup import MarkupNode
    from docsfetcher.models.page import PageRecord

BODY_BLOCK_TAGS = frozenset({"p", "ul", "ol", "pre", "code", "table"})

SUMMARY_INSTRUCTIONS = """## Instructions for Summarization

1. Provide a concise overview of what this library/package does
2. Highlight key features and functionality
3. Include basic usage examples when available
4. Format the response for readability
5. If any part of the documentation is unclear, mention this
6. Include installation instructions if available
"""

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    return _SLUG_RE.sub("-", title.lower()).strip("-")


def compile_document(
    pages: Sequence[PageRecord],
    subject: str,
    *,
    generated_at: datetime | None = None,
) -> str:
    """Merge ``pages`` (in crawl order) into one Markdown document."""
    generated_at = generated_at or datetime.now(UTC)

    parts = [
        f"# {subject} Documentation\n\n",
        "## Documentation Overview\n\n",
        f"Library Name: {subject}\n",
        f"Pages Analyzed: {len(pages)}\n",
        f"Generated: {generated_at.isoformat()}\n\n",
        "## Table of Contents\n\n",
    ]
    for number, page in enumerate(pages, start=1):
        parts.append(f"{number}. [{page.title}](#{slugify(page.title)})\n")
    parts.append("\n")

    for index, page in enumerate(pages):
        parts.append(_render_page(page))
        if index < len(pages) - 1:
            parts.append("---\n\n")

    parts.append(SUMMARY_INSTRUCTIONS)
    return "".join(parts)


def _render_page(page: PageRecord) -> str:
    parts = [f"## {page.title}\n\n", f"Source: {page.url}\n\n"]

    if page.content is not None:
        body = _render_body(page.content)
        if body:
            parts.append(body)

    if page.code_examples:
        parts.append("### Code Examples\n\n")
        for example in page.code_examples:
            if example.description:
                parts.append(f"#### {example.description}\n\n")
            parts.append(_fence(example.code, example.language))

    if page.api_entries:
        parts.append("### API Reference\n\n")
        for entry in page.api_entries:
            parts.append(f"#### {entry.name}\n\n")
            if entry.signature:
                parts.append(_fence(entry.signature))
            if entry.description:
                parts.append(f"{entry.description}\n\n")

    return "".join(parts)


def _render_body(content: MarkupNode) -> str:
    """Rebuild page text from its headings and the blocks that follow them.

    For each heading, the following siblings up to the next heading are
    scanned and only paragraph/list/code/table blocks are kept. A page with
    no headings at all falls back to its block-level nodes in order.
    """
    parts: list[str] = []
    saw_heading = False

    for node, siblings, index in walk_with_siblings(content):
        if not is_heading(node):
            continue
        saw_heading = True
        text = clean_text(node.text_content())
        if text:
            level = min(heading_level(node) + 1, 6)
            parts.append(f"{'#' * level} {text}\n\n")
        for follower in siblings[index + 1 :]:
            if is_heading(follower):
                break
            if follower.tag in BODY_BLOCK_TAGS:
                parts.append(_render_block(follower))

    if not saw_heading:
        parts.extend(_render_block(block) for block in _top_level_blocks(content))

    return "".join(part for part in parts if part)


def _top_level_blocks(root: MarkupNode) -> list[MarkupNode]:
    """Outermost body blocks in document order."""
    blocks: list[MarkupNode] = []
    for child in root.elements():
        if child.tag in BODY_BLOCK_TAGS:
            blocks.append(child)
        else:
            blocks.extend(_top_level_blocks(child))
    return blocks


def _render_block(node: MarkupNode) -> str:
    if node.tag in ("pre", "code"):
        code = node.text_content().strip("\n")
        return _fence(code, infer_language(node)) if code.strip() else ""

    if node.tag in ("ul", "ol"):
        items = [clean_text(item.text_content()) for item in node.elements() if item.tag == "li"]
        lines = [
            f"{number}. {item}" if node.tag == "ol" else f"- {item}"
            for number, item in enumerate((item for item in items if item), start=1)
        ]
        return "\n".join(lines) + "\n\n" if lines else ""

    if node.tag == "table":
        rows = []
        for row in node.iter_elements():
            if row.tag != "tr":
                continue
            cells = [clean_text(cell.text_content()) for cell in row.elements()]
            if any(cells):
                rows.append(" | ".join(cells))
        return "\n".join(rows) + "\n\n" if rows else ""

    text = clean_text(node.text_content())
    return f"{text}\n\n" if text else ""


def _fence(code: str, language: str = "") -> str:
    return f"```{language}\n{code}\n```\n\n"
