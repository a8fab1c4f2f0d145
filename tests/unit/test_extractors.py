"""Unit tests for link, code example and API entry extraction."""

from __future__ import annotations

import pytest

from docsfetcher.extractors import (
    extract_api_entries,
    extract_code_examples,
    extract_links,
    extract_page,
    infer_language,
)
from docsfetcher.markup import parse_markup

BASE = "https://docs.example.com/guide/index.html"


def _links(body: str, subject: str = "widget", base: str = BASE, **kwargs) -> list[str]:
    return extract_links(parse_markup(body), base, subject, **kwargs)


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------


class TestExtractLinks:
    def test_cross_host_links_dropped(self) -> None:
        body = (
            '<a href="https://docs.example.com/api/">API</a>'
            '<a href="https://other.org/api/">Other API</a>'
            '<a href="https://sub.docs.example.com/api/">Sub API</a>'
        )
        assert _links(body) == ["https://docs.example.com/api/"]

    def test_relative_links_resolved(self) -> None:
        body = '<a href="../reference/types.html">Types</a><a href="usage">Usage</a>'
        assert _links(body) == [
            "https://docs.example.com/reference/types.html",
            "https://docs.example.com/guide/usage",
        ]

    def test_keyword_in_link_text_is_enough(self) -> None:
        assert _links('<a href="/p/42">Tutorial</a>') == ["https://docs.example.com/p/42"]

    def test_subject_in_path(self) -> None:
        assert _links('<a href="/widget-core/">Core</a>') == ["https://docs.example.com/widget-core/"]

    def test_subject_match_is_case_insensitive(self) -> None:
        assert _links('<a href="/p/1">The Widget class</a>', subject="Widget") == [
            "https://docs.example.com/p/1"
        ]

    def test_irrelevant_links_dropped(self) -> None:
        body = '<a href="/blog/2024">Blog</a><a href="/pricing">Pricing</a>'
        assert _links(body) == []

    def test_same_page_fragment_excluded(self) -> None:
        body = '<a href="#install">Getting started</a><a href="index.html#api">API</a>'
        assert _links(body) == []

    def test_fragment_stripped_from_kept_links(self) -> None:
        body = '<a href="/api/#widget">API</a><a href="/api/#other">API again</a>'
        assert _links(body) == ["https://docs.example.com/api/"]

    def test_deduplicated_in_discovery_order(self) -> None:
        body = (
            '<a href="/tutorial/">Tutorial</a>'
            '<a href="/api/">API</a>'
            '<a href="/tutorial/">Tutorial (again)</a>'
        )
        assert _links(body) == [
            "https://docs.example.com/tutorial/",
            "https://docs.example.com/api/",
        ]

    def test_non_http_schemes_dropped(self) -> None:
        body = (
            '<a href="mailto:docs@example.com">Docs team</a>'
            '<a href="javascript:void(0)">API</a>'
        )
        assert _links(body) == []

    def test_anchor_without_href_ignored(self) -> None:
        assert _links('<a name="api">API</a><a href="">docs</a>') == []

    def test_allowed_host_override(self) -> None:
        body = '<a href="https://docs.example.com/api/">API</a>'
        assert _links(body, allowed_host="example.org") == []

    def test_empty_subject_does_not_match_everything(self) -> None:
        assert _links('<a href="/pricing">Pricing</a>', subject="") == []

    def test_malformed_href_ignored(self) -> None:
        body = '<a href="http://[broken/api">API</a><a href="/api/">API</a>'
        assert _links(body) == ["https://docs.example.com/api/"]


# ---------------------------------------------------------------------------
# Code examples
# ---------------------------------------------------------------------------


class TestExtractCodeExamples:
    def test_language_class_on_nested_code(self) -> None:
        tree = parse_markup('<pre><code class="language-rust">fn main() {}</code></pre>')
        examples = extract_code_examples(tree)
        assert len(examples) == 1
        assert examples[0].language == "rust"
        assert examples[0].code == "fn main() {}"

    def test_short_blocks_discarded(self) -> None:
        tree = parse_markup("<pre>x = 1</pre><code>foo()</code>")
        assert extract_code_examples(tree) == []

    def test_nested_code_counted_once(self) -> None:
        html = '<div class="highlight"><pre><code>print("hello world")</code></pre></div>'
        examples = extract_code_examples(parse_markup(html))
        assert [example.code for example in examples] == ['print("hello world")']

    def test_multiple_blocks_in_document_order(self) -> None:
        html = "<pre>first block of code</pre><p>text</p><pre>second block of code</pre>"
        examples = extract_code_examples(parse_markup(html))
        assert [example.code for example in examples] == [
            "first block of code",
            "second block of code",
        ]

    def test_language_from_data_attribute(self) -> None:
        tree = parse_markup('<pre data-language="Python">import widget</pre>')
        assert extract_code_examples(tree)[0].language == "python"

    def test_class_takes_priority_over_attribute(self) -> None:
        tree = parse_markup('<pre class="lang-go" data-lang="text">package main</pre>')
        assert extract_code_examples(tree)[0].language == "go"

    def test_language_from_class_hint(self) -> None:
        tree = parse_markup('<pre class="example-js">const x = require("y")</pre>')
        assert extract_code_examples(tree)[0].language == "javascript"

    def test_typescript_class_hint(self) -> None:
        tree = parse_markup('<pre class="snippet ts">let x: number = 1;</pre>')
        assert extract_code_examples(tree)[0].language == "typescript"

    def test_hljs_class_is_not_javascript(self) -> None:
        tree = parse_markup('<pre><code class="hljs">some plain code</code></pre>')
        assert extract_code_examples(tree)[0].language == ""

    def test_description_from_preceding_heading(self) -> None:
        html = "<h2>Installation</h2><div>note</div><pre>pip install widget</pre>"
        example = extract_code_examples(parse_markup(html))[0]
        assert example.description == "Installation"

    def test_description_prefers_nearest_paragraph(self) -> None:
        html = "<h2>Usage</h2><p>Create a   widget:</p><pre>w = Widget(size=3)</pre>"
        example = extract_code_examples(parse_markup(html))[0]
        assert example.description == "Create a widget:"

    def test_description_falls_back_to_parent_heading(self) -> None:
        html = "<section><pre>widget.render()</pre><h3>Rendering</h3></section>"
        example = extract_code_examples(parse_markup(html))[0]
        assert example.description == "Rendering"

    def test_description_empty_when_nothing_found(self) -> None:
        example = extract_code_examples(parse_markup("<div><pre>widget.render()</pre></div>"))[0]
        assert example.description == ""


class TestInferLanguage:
    def test_syntax_prefix(self) -> None:
        node = parse_markup('<pre class="syntax-ruby">x</pre>').elements()[0]
        assert infer_language(node) == "ruby"

    def test_no_hints(self) -> None:
        node = parse_markup("<pre>x</pre>").elements()[0]
        assert infer_language(node) == ""

    @pytest.mark.parametrize(
        ("cls", "language"),
        [
            ("nodejs", "javascript"),
            ("tsblock", "typescript"),
            ("code-pysnippet", "python"),
            ("jsconsole", "javascript"),
        ],
    )
    def test_fused_class_hints(self, cls: str, language: str) -> None:
        node = parse_markup(f'<pre class="{cls}">x</pre>').elements()[0]
        assert infer_language(node) == language

    @pytest.mark.parametrize("cls", ["hljs", "pygments", "highlight", "prettyprint"])
    def test_highlighter_classes_carry_no_language(self, cls: str) -> None:
        node = parse_markup(f'<pre class="{cls}">x</pre>').elements()[0]
        assert infer_language(node) == ""


# ---------------------------------------------------------------------------
# API entries
# ---------------------------------------------------------------------------


class TestExtractApiEntries:
    def test_signature_and_description(self) -> None:
        html = (
            "<h3>Widget.render</h3>"
            "<p>Render the widget   to HTML.</p>"
            "<pre>render(self, *, pretty=False) -> str</pre>"
        )
        entries = extract_api_entries(parse_markup(html))
        assert len(entries) == 1
        assert entries[0].name == "Widget.render"
        assert entries[0].signature == "render(self, *, pretty=False) -> str"
        assert entries[0].description == "Render the widget to HTML."

    def test_candidates_behind_next_heading_rejected(self) -> None:
        html = "<h3>Empty section</h3><h3>Widget.close</h3><pre>close(self) -> None</pre>"
        entries = extract_api_entries(parse_markup(html))
        assert [entry.name for entry in entries] == ["Widget.close"]

    def test_description_only(self) -> None:
        entries = extract_api_entries(parse_markup("<h2>Overview</h2><p>Widgets are small.</p>"))
        assert entries[0].signature == ""
        assert entries[0].description == "Widgets are small."

    def test_signature_class(self) -> None:
        html = '<h4>open</h4><div class="function-signature">open(path)</div>'
        entries = extract_api_entries(parse_markup(html))
        assert entries[0].signature == "open(path)"

    def test_boilerplate_headings_skipped(self) -> None:
        html = (
            "<h2>Introduction</h2><p>Welcome.</p>"
            "<h2>Getting Started</h2><pre>npm install widget</pre>"
        )
        assert extract_api_entries(parse_markup(html)) == []

    def test_long_headings_skipped(self) -> None:
        html = f"<h2>{'x' * 101}</h2><p>Description.</p>"
        assert extract_api_entries(parse_markup(html)) == []

    def test_heading_without_content_not_emitted(self) -> None:
        assert extract_api_entries(parse_markup("<h2>Lonely</h2><div>not a block</div>")) == []

    def test_nested_headings_in_document_order(self) -> None:
        html = "<div><h2>first</h2><p>one</p></div><h2>second</h2><p>two</p>"
        entries = extract_api_entries(parse_markup(html))
        assert [entry.name for entry in entries] == ["first", "second"]


# ---------------------------------------------------------------------------
# Page assembly
# ---------------------------------------------------------------------------


class TestExtractPage:
    def test_full_record(self) -> None:
        html = (
            "<html><head><title>Widget Docs</title></head><body>"
            "<nav><a href='/api/'>API</a></nav>"
            "<main><h1>Widget</h1><p>Intro text.</p>"
            "<pre><code class='language-python'>import widget</code></pre></main>"
            "</body></html>"
        )
        page = extract_page(parse_markup(html), "https://docs.example.com/", "widget")
        assert page.url == "https://docs.example.com/"
        assert page.title == "Widget Docs"
        assert page.links == ["https://docs.example.com/api/"]
        assert page.content is not None
        assert page.content.tag == "main"
        assert [example.language for example in page.code_examples] == ["python"]
        assert page.api_entries[0].name == "Widget"
        assert page.fetched_at.tzinfo is not None

    def test_title_falls_back_to_h1(self) -> None:
        page = extract_page(parse_markup("<body><h1>Widget API</h1></body>"), BASE, "widget")
        assert page.title == "Widget API"

    def test_title_falls_back_to_url(self) -> None:
        page = extract_page(parse_markup("<body><p>x</p></body>"), BASE, "widget")
        assert page.title == BASE

    def test_content_falls_back_to_body(self) -> None:
        page = extract_page(parse_markup("<body><p>x</p></body>"), BASE, "widget")
        assert page.content is not None
        assert page.content.tag == "body"

    def test_content_uses_readme_class(self) -> None:
        html = "<body><div>chrome</div><div class='markdown readme'><p>x</p></div></body>"
        page = extract_page(parse_markup(html), BASE, "widget")
        assert page.content is not None
        assert page.content.classes == ["markdown", "readme"]

    def test_empty_document_still_yields_record(self) -> None:
        page = extract_page(parse_markup(""), BASE, "widget")
        assert page.content is None
        assert page.links == []
        assert page.code_examples == []
        assert page.api_entries == []
