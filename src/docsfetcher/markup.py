"""HTML to MarkupNode conversion.

BeautifulSoup does the parsing; the result is immediately converted into a
plain ``MarkupNode`` tree so the extractor and compiler never touch the
parser's object model. Non-content nodes (scripts, styles, frames) and
comments are dropped during conversion.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from docsfetcher.models.markup import DOCUMENT_TAG, TEXT_TAG, MarkupNode

if TYPE_CHECKING:
    from collections.abc import Iterator

STRIPPED_TAGS = frozenset({"script", "style", "noscript", "iframe", "frame", "frameset"})
HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})

_WHITESPACE_RE = re.compile(r"\s+")


def parse_markup(html: str) -> MarkupNode:
    """Parse an HTML document into a ``MarkupNode`` rooted at ``#document``."""
    soup = BeautifulSoup(html, "html.parser")
    return MarkupNode(tag=DOCUMENT_TAG, children=_convert_children(soup))


def _convert_children(tag: Tag) -> list[MarkupNode]:
    children: list[MarkupNode] = []
    for child in tag.children:
        if isinstance(child, Tag):
            if child.name in STRIPPED_TAGS:
                continue
            children.append(
                MarkupNode(
                    tag=child.name.lower(),
                    attrs=_convert_attrs(child),
                    children=_convert_children(child),
                )
            )
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            # PreformattedString covers comments, doctypes, CDATA and PIs
            children.append(MarkupNode(tag=TEXT_TAG, text=str(child)))
    return children


def _convert_attrs(tag: Tag) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for name, value in tag.attrs.items():
        # Multi-valued attributes (class, rel) come back as lists
        attrs[name.lower()] = " ".join(value) if isinstance(value, list) else str(value)
    return attrs


def clean_text(text: str) -> str:
    """Collapse runs of whitespace and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def is_heading(node: MarkupNode) -> bool:
    return node.tag in HEADING_TAGS


def heading_level(node: MarkupNode) -> int:
    return int(node.tag[1])


def find_first(
    root: MarkupNode,
    *,
    tags: frozenset[str] = frozenset(),
    classes: frozenset[str] = frozenset(),
    ids: frozenset[str] = frozenset(),
) -> MarkupNode | None:
    """Return the first descendant element matching any of the given selectors."""
    for node in root.iter_elements():
        if node.tag in tags:
            return node
        if classes and classes.intersection(node.classes):
            return node
        if ids and node.get("id") in ids:
            return node
    return None


def walk_with_siblings(
    parent: MarkupNode,
) -> Iterator[tuple[MarkupNode, list[MarkupNode], int]]:
    """Yield ``(node, siblings, index)`` for every element in document order.

    ``siblings`` is the element-only child list of the node's parent and
    ``siblings[index] is node``. Lets callers look around a node without
    parent pointers in the tree.
    """
    siblings = parent.elements()
    for index, node in enumerate(siblings):
        yield node, siblings, index
        yield from walk_with_siblings(node)
