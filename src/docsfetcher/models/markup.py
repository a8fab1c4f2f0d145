from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel

TEXT_TAG = "#text"
DOCUMENT_TAG = "#document"


class MarkupNode(BaseModel):
    """Parser-independent HTML node.

    Element nodes carry ``tag``, ``attrs`` and ``children``. Text nodes use
    the ``#text`` tag and carry ``text`` only.
    """

    tag: str
    attrs: dict[str, str] = {}
    children: list[MarkupNode] = []
    text: str = ""

    @property
    def is_text(self) -> bool:
        return self.tag == TEXT_TAG

    @property
    def classes(self) -> list[str]:
        return self.attrs.get("class", "").split()

    def get(self, name: str, default: str = "") -> str:
        return self.attrs.get(name, default)

    def elements(self) -> list[MarkupNode]:
        """Direct children that are elements (text nodes skipped)."""
        return [child for child in self.children if not child.is_text]

    def iter_elements(self) -> Iterator[MarkupNode]:
        """Yield every descendant element in document order (self excluded)."""
        for child in self.children:
            if child.is_text:
                continue
            yield child
            yield from child.iter_elements()

    def text_content(self) -> str:
        if self.is_text:
            return self.text
        return "".join(child.text_content() for child in self.children)
