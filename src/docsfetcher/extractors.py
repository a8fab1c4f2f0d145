"""Heuristic extraction of links, code examples and API entries.

Three independent passes over a MarkupNode tree. All of them are pure
functions of the tree and may return empty results; nothing here raises
for odd markup.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from urllib.parse import urldefrag, urljoin, urlparse

from docsfetcher.markup import (
    HEADING_TAGS,
    clean_text,
    find_first,
    is_heading,
    walk_with_siblings,
)
from docsfetcher.models.page import ApiEntry, CodeExample, PageRecord

if TYPE_CHECKING:
    from docsfetcher.models.markup import MarkupNode

RELEVANT_KEYWORDS: tuple[str, ...] = (
    "api",
    "reference",
    "doc",
    "guide",
    "tutorial",
    "example",
    "usage",
    "getting-started",
    "introduction",
    "started",
)

MIN_CODE_LENGTH = 10
MAX_API_HEADING_LENGTH = 100
BOILERPLATE_HEADINGS: tuple[str, ...] = ("introduction", "getting started")

_CODE_TAGS = frozenset({"pre", "code"})
_CODE_CLASS_MARKERS = ("highlight", "codehilite", "code-example")
_SIGNATURE_TAGS = frozenset({"pre", "code"})

_LANGUAGE_CLASS_RE = re.compile(r"^(?:language|lang|syntax)-(\w[\w+#-]*)$", re.IGNORECASE)
_LANGUAGE_ATTRS = ("data-language", "data-lang", "language", "lang")
_CLASS_PART_RE = re.compile(r"[-_]")
_LANGUAGE_HINTS: tuple[tuple[str, frozenset[str]], ...] = (
    ("javascript", frozenset({"js", "javascript", "jsx", "nodejs"})),
    ("typescript", frozenset({"ts", "typescript", "tsx"})),
    ("python", frozenset({"py", "python"})),
)
_LANGUAGE_PREFIXES: tuple[tuple[str, str], ...] = (
    ("javascript", "js"),
    ("typescript", "ts"),
    ("python", "py"),
)
# Highlighter names say nothing about the language
_HIGHLIGHTER_TOKENS = frozenset({"hljs", "pygments", "prettyprint"})

_CONTENT_TAGS = frozenset({"main", "article"})
_CONTENT_CLASSES = frozenset({"readme", "content", "documentation"})
_CONTENT_IDS = frozenset({"readme"})


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------


def extract_links(
    tree: MarkupNode,
    base_url: str,
    subject: str,
    allowed_host: str | None = None,
) -> list[str]:
    """Return same-host documentation links in discovery order.

    ``allowed_host`` defaults to the host of ``base_url``; the crawler passes
    the seed's host. Fragments are dropped from kept links, and links that
    only point back into ``base_url`` are excluded.
    """
    host = (allowed_host or urlparse(base_url).hostname or "").lower()
    current_page = urldefrag(base_url).url
    subject_lower = subject.strip().lower()

    links: dict[str, None] = {}
    for node in tree.iter_elements():
        if node.tag != "a":
            continue
        href = node.get("href").strip()
        if not href:
            continue
        try:
            absolute = urljoin(base_url, href)
            parsed = urlparse(absolute)
        except ValueError:
            # Malformed hrefs such as unbalanced IPv6 brackets
            continue
        if parsed.scheme not in ("http", "https") or parsed.hostname != host:
            continue

        page_url = urldefrag(absolute).url
        if page_url == current_page:
            continue

        path = parsed.path.lower()
        text = clean_text(node.text_content()).lower()
        if _is_relevant(path, text, subject_lower):
            links.setdefault(page_url, None)

    return list(links)


def _is_relevant(path: str, text: str, subject: str) -> bool:
    if any(keyword in path or keyword in text for keyword in RELEVANT_KEYWORDS):
        return True
    return bool(subject) and (subject in path or subject in text)


# ---------------------------------------------------------------------------
# Code examples
# ---------------------------------------------------------------------------


def extract_code_examples(tree: MarkupNode) -> list[CodeExample]:
    """Collect code blocks, one example per outermost candidate node."""
    examples: list[CodeExample] = []
    _collect_code(tree, examples)
    return examples


def _collect_code(parent: MarkupNode, examples: list[CodeExample]) -> None:
    siblings = parent.elements()
    for index, node in enumerate(siblings):
        if not _is_code_candidate(node):
            _collect_code(node, examples)
            continue

        # Nested <code> inside a taken block is never visited again
        code = node.text_content().strip()
        if len(code) < MIN_CODE_LENGTH:
            continue
        examples.append(
            CodeExample(
                code=code,
                language=infer_language(node),
                description=_describe(parent, siblings, index),
            )
        )


def _is_code_candidate(node: MarkupNode) -> bool:
    if node.tag in _CODE_TAGS:
        return True
    return any(marker in cls for cls in node.classes for marker in _CODE_CLASS_MARKERS)


def infer_language(node: MarkupNode) -> str:
    """Infer a language tag from a code node or any of its descendants.

    Priority: ``language-*`` style classes, then explicit language
    attributes, then class-name hints. Returns ``""`` when nothing matches.
    """
    candidates = [node, *node.iter_elements()]

    for candidate in candidates:
        for cls in candidate.classes:
            match = _LANGUAGE_CLASS_RE.match(cls)
            if match:
                return match.group(1).lower()

    for candidate in candidates:
        for attr in _LANGUAGE_ATTRS:
            value = candidate.get(attr).strip()
            if value:
                return value.lower()

    for candidate in candidates:
        parts = {part for cls in candidate.classes for part in _CLASS_PART_RE.split(cls.lower())}
        for language, hints in _LANGUAGE_HINTS:
            if parts & hints:
                return language
        fused = parts - _HIGHLIGHTER_TOKENS
        for language, prefix in _LANGUAGE_PREFIXES:
            if any(part.startswith(prefix) for part in fused):
                return language

    return ""


def _describe(parent: MarkupNode, siblings: list[MarkupNode], index: int) -> str:
    for previous in reversed(siblings[:index]):
        if is_heading(previous) or previous.tag == "p":
            return clean_text(previous.text_content())

    heading = find_first(parent, tags=HEADING_TAGS)
    if heading is not None:
        return clean_text(heading.text_content())
    return ""


# ---------------------------------------------------------------------------
# API entries
# ---------------------------------------------------------------------------


def extract_api_entries(tree: MarkupNode) -> list[ApiEntry]:
    """Pair each heading with the first signature and paragraph in its section.

    A heading's section is the run of following siblings up to the next
    heading. Long headings and boilerplate titles are skipped.
    """
    entries: list[ApiEntry] = []
    for node, siblings, index in walk_with_siblings(tree):
        if not is_heading(node):
            continue
        name = clean_text(node.text_content())
        if not name or len(name) > MAX_API_HEADING_LENGTH:
            continue
        if any(title in name.lower() for title in BOILERPLATE_HEADINGS):
            continue

        signature = ""
        description = ""
        for follower in siblings[index + 1 :]:
            if is_heading(follower):
                break
            if not signature and _is_signature(follower):
                signature = clean_text(follower.text_content())
            if not description and follower.tag == "p":
                description = clean_text(follower.text_content())
            if signature and description:
                break

        if signature or description:
            entries.append(ApiEntry(name=name, signature=signature, description=description))
    return entries


def _is_signature(node: MarkupNode) -> bool:
    if node.tag in _SIGNATURE_TAGS:
        return True
    return any("signature" in cls for cls in node.classes)


# ---------------------------------------------------------------------------
# Page assembly
# ---------------------------------------------------------------------------


def extract_page(
    tree: MarkupNode,
    url: str,
    subject: str,
    allowed_host: str | None = None,
) -> PageRecord:
    """Build the full PageRecord for a fetched page."""
    return PageRecord(
        url=url,
        title=_page_title(tree, url),
        content=_main_content(tree),
        links=extract_links(tree, url, subject, allowed_host),
        code_examples=extract_code_examples(tree),
        api_entries=extract_api_entries(tree),
        fetched_at=datetime.now(UTC),
    )


def _page_title(tree: MarkupNode, url: str) -> str:
    for tags in (frozenset({"title"}), frozenset({"h1"})):
        node = find_first(tree, tags=tags)
        if node is not None:
            title = clean_text(node.text_content())
            if title:
                return title
    return url


def _main_content(tree: MarkupNode) -> MarkupNode | None:
    content = find_first(tree, tags=_CONTENT_TAGS, classes=_CONTENT_CLASSES, ids=_CONTENT_IDS)
    if content is None:
        content = find_first(tree, tags=frozenset({"body"}))
    if content is None:
        content = tree if tree.elements() else None
    return content
